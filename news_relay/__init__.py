"""
News Relay - failover proxy for third-party news APIs.

This package exposes one stable HTTP endpoint that queries GNews,
NewsAPI and Bing News in priority order, hiding provider credentials
and request quirks from callers.

Main entry point is the CLI via `news-relay serve`.

Example:
    $ news-relay serve --port 8787
    $ curl 'http://127.0.0.1:8787/?country=us&topic=technology'
"""

__all__ = ["__version__", "CanonicalQuery", "FailoverOrchestrator", "create_app"]
__version__ = "0.1.0"

from .core.types import CanonicalQuery
from .gateway import create_app
from .orchestrator import FailoverOrchestrator
