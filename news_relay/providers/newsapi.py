"""NewsAPI provider (https://newsapi.org/docs)."""

from __future__ import annotations

from typing import Any

from ..core.types import CanonicalQuery, ProviderRequest
from .base import NewsProvider


class NewsAPIProvider(NewsProvider):
    """NewsAPI v2 adapter.

    `top-headlines` takes country/category and no free text; `everything`
    takes free text and language but neither country nor category. A
    topic that is not a NewsAPI category is folded into the `everything`
    query instead. `top-headlines` rejects a request with neither country
    nor category, so an unfiltered request asks for `general`.
    """

    name = "newsapi"
    label = "NewsAPI"
    default_base_url = "https://newsapi.org/v2"
    categories = frozenset(
        {
            "business",
            "entertainment",
            "general",
            "health",
            "science",
            "sports",
            "technology",
        }
    )
    languages = {"cn": "zh", "hk": "zh"}

    def build_request(self, query: CanonicalQuery) -> ProviderRequest:
        params: dict[str, str] = {
            "apiKey": self.settings.api_key or "",
            "sortBy": "publishedAt",
        }
        topic = query.topic

        if query.query or (topic and not self.is_category(topic)):
            endpoint = "everything"
            terms = []
            if query.query:
                terms.append(query.query)
            if topic:
                expression = self.topic_expression(topic)
                if query.query and " OR " in expression:
                    expression = f"({expression})"
                terms.append(expression)
            params["q"] = " AND ".join(terms)
            if query.country in self.languages:
                params["language"] = self.languages[query.country]
        else:
            endpoint = "top-headlines"
            if query.country:
                params["country"] = query.country
            if topic:
                params["category"] = topic
            elif not query.country:
                params["category"] = "general"

        return ProviderRequest(
            url=f"{self.base_url}/{endpoint}",
            params=params,
            headers={"User-Agent": self.settings.user_agent},
        )

    def error_detail(self, data: Any) -> str | None:
        # {"status": "error", "code": "rateLimited", "message": "..."}
        if not isinstance(data, dict):
            return None
        code = data.get("code")
        message = data.get("message")
        if code and message:
            return f"[{code}] {message}"
        return message or None
