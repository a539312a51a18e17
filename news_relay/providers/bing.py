"""Bing News Search provider (Bing Search API v7)."""

from __future__ import annotations

from typing import Any

from ..core.normalize import normalize_bing_news
from ..core.types import CanonicalQuery, ProviderRequest
from .base import NewsProvider


class BingNewsProvider(NewsProvider):
    """Bing News v7 adapter.

    `/news` returns category headlines, `/news/search` free-text results.
    Countries map to markets where Bing has one; category browsing only
    exists in a handful of markets, so the market is dropped for the
    others. Results use a different schema and are normalized.
    """

    name = "bing"
    label = "Bing News"
    default_base_url = "https://api.bing.microsoft.com/v7.0"
    reshapes = True

    category_map = {
        "business": "Business",
        "entertainment": "Entertainment",
        "health": "Health",
        "politics": "Politics",
        "science": "ScienceAndTechnology",
        "sports": "Sports",
        "technology": "ScienceAndTechnology",
        "world": "World",
    }
    categories = frozenset(category_map) | {"general"}
    markets = {
        "au": "en-AU",
        "ca": "en-CA",
        "cn": "zh-CN",
        "de": "de-DE",
        "fr": "fr-FR",
        "gb": "en-GB",
        "hk": "zh-HK",
        "in": "en-IN",
        "jp": "ja-JP",
        "tw": "zh-TW",
        "us": "en-US",
    }
    category_markets = frozenset({"en-AU", "en-CA", "en-GB", "en-IN", "en-US", "zh-CN"})

    def build_request(self, query: CanonicalQuery) -> ProviderRequest:
        params: dict[str, str] = {"sortBy": "Date"}
        topic = query.topic
        category = None

        if query.query:
            endpoint = "news/search"
            params["q"] = query.query
        elif topic and not self.is_category(topic):
            endpoint = "news/search"
            params["q"] = self.topic_expression(topic)
        else:
            endpoint = "news"
            category = self.category_map.get(topic or "")
            if category:
                params["category"] = category

        if query.country:
            market = self.markets.get(query.country)
            if market is None:
                if not category:
                    params["cc"] = query.country
            elif not category or market in self.category_markets:
                params["mkt"] = market

        return ProviderRequest(
            url=f"{self.base_url}/{endpoint}",
            params=params,
            headers={
                "Ocp-Apim-Subscription-Key": self.settings.api_key or "",
                "User-Agent": self.settings.user_agent,
            },
        )

    def normalize(self, data: Any) -> Any:
        return normalize_bing_news(data)

    def error_detail(self, data: Any) -> str | None:
        # v7 sends {"errors": [{"code", "message"}]}; the gateway sends {"error": {...}}
        if not isinstance(data, dict):
            return None
        errors = data.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            error = errors[0]
        elif isinstance(data.get("error"), dict):
            error = data["error"]
        else:
            return None
        code = error.get("code")
        message = error.get("message")
        if code and message:
            return f"[{code}] {message}"
        return message or code or None
