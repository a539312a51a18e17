"""GNews provider (https://gnews.io/docs/v4)."""

from __future__ import annotations

from typing import Any

from ..core.types import CanonicalQuery, ProviderRequest
from .base import CHINESE_COUNTRIES, NewsProvider


class GNewsProvider(NewsProvider):
    """GNews v4 adapter.

    `top-headlines` serves country/topic browsing and rejects `q`;
    `search` serves free text and rejects `topic`. Topics outside the
    GNews category enum are searched as free text instead. GNews rejects
    topic filters for cn/hk, so the country is dropped in that case and
    the language filter keeps results in Chinese.
    """

    name = "gnews"
    label = "GNews"
    default_base_url = "https://gnews.io/api/v4"
    categories = frozenset(
        {
            "general",
            "world",
            "nation",
            "business",
            "technology",
            "entertainment",
            "sports",
            "science",
            "health",
        }
    )
    languages = {"cn": "zh", "hk": "zh"}

    def build_request(self, query: CanonicalQuery) -> ProviderRequest:
        params: dict[str, str] = {
            "sortby": "publishedAt",
            "token": self.settings.api_key or "",
        }

        topic = query.topic
        if query.query:
            endpoint = "search"
            params["q"] = query.query
        elif topic and not self.is_category(topic):
            endpoint = "search"
            params["q"] = self.topic_expression(topic)
        else:
            endpoint = "top-headlines"
            if topic:
                params["topic"] = topic

        if query.country:
            if not (topic and query.country in CHINESE_COUNTRIES):
                params["country"] = query.country
            if query.country in self.languages:
                params["lang"] = self.languages[query.country]

        return ProviderRequest(
            url=f"{self.base_url}/{endpoint}",
            params=params,
            headers={"User-Agent": self.settings.user_agent},
        )

    def error_detail(self, data: Any) -> str | None:
        # GNews sends {"errors": ["..."]} or {"errors": {"field": "..."}}
        if not isinstance(data, dict):
            return None
        errors = data.get("errors")
        if isinstance(errors, list):
            return "; ".join(str(item) for item in errors) or None
        if isinstance(errors, dict):
            return "; ".join(f"{key}: {value}" for key, value in errors.items()) or None
        return None
