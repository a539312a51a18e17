"""
Response normalizers for providers whose schema differs from the canonical one.

Providers that already return the canonical article list (GNews, NewsAPI)
are relayed byte-for-byte and never pass through here.
"""

from __future__ import annotations

from typing import Any

from .types import Article


def _dig(obj: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing."""
    current = obj
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def bing_article(item: dict[str, Any]) -> Article:
    """Map one Bing News `NewsArticle` object to the canonical Article."""
    return Article(
        title=_dig(item, "name"),
        description=_dig(item, "description"),
        url=_dig(item, "url"),
        image_url=_dig(item, "image", "thumbnail", "contentUrl"),
        published_at=_dig(item, "datePublished"),
        source_name=_dig(item, "provider", 0, "name"),
    )


def normalize_bing_news(data: Any) -> dict[str, Any]:
    """Reshape a Bing News `News` answer into the canonical article list.

    Args:
        data: Decoded JSON body from /news or /news/search

    Returns:
        Dictionary with totalArticles and articles in canonical shape
    """
    items = _dig(data, "value")
    if not isinstance(items, list):
        items = []
    articles = [bing_article(item).to_dict() for item in items if isinstance(item, dict)]
    total = _dig(data, "totalEstimatedMatches")
    if not isinstance(total, int):
        total = len(articles)
    return {"totalArticles": total, "articles": articles}
