"""
Core domain models and response normalization.

This package contains data types and pure logic that is independent
of any specific provider or of the HTTP gateway.
"""

from .normalize import bing_article, normalize_bing_news
from .types import (
    AllFailed,
    Article,
    CanonicalQuery,
    Failed,
    FailoverPolicy,
    FailureKind,
    FinalOutcome,
    ProviderOutcome,
    ProviderRequest,
    ProviderSettings,
    Success,
    Usable,
)

__all__ = [
    "AllFailed",
    "Article",
    "CanonicalQuery",
    "Failed",
    "FailoverPolicy",
    "FailureKind",
    "FinalOutcome",
    "ProviderOutcome",
    "ProviderRequest",
    "ProviderSettings",
    "Success",
    "Usable",
    "bing_article",
    "normalize_bing_news",
]
