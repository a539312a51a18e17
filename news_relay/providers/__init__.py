"""
Upstream news provider implementations.

This package contains the abstract base class and one adapter per
provider. The orchestrator only depends on NewsProvider.attempt().

To add a new provider:
1. Inherit from NewsProvider and implement build_request()
2. Override normalize() and set reshapes = True if its schema differs
3. Register the class in factory._PROVIDER_REGISTRY
4. Add a default credential env var in config.DEFAULT_API_KEY_ENVS
"""

from .base import NewsProvider
from .bing import BingNewsProvider
from .factory import available_providers, create_provider, create_providers
from .gnews import GNewsProvider
from .newsapi import NewsAPIProvider

__all__ = [
    "NewsProvider",
    "GNewsProvider",
    "NewsAPIProvider",
    "BingNewsProvider",
    "available_providers",
    "create_provider",
    "create_providers",
]
