"""
Abstract base class for upstream news providers.

New providers should inherit from NewsProvider, set the class-level
vocabulary (categories, topic map, locale map) and implement
build_request. Classification and transport handling are shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from typing import Any, ClassVar

import httpx

from ..core.types import (
    QUOTA_OR_AUTH_STATUSES,
    CanonicalQuery,
    Failed,
    FailoverPolicy,
    FailureKind,
    ProviderOutcome,
    ProviderRequest,
    ProviderSettings,
    Usable,
)
from ..logging_utils import get_logger, redact_url, truncate_text


# Canonical topics with no slot in any provider's category enum
DEFAULT_TOPIC_QUERIES: dict[str, str] = {
    "crypto": "cryptocurrency OR bitcoin",
}

CHINESE_COUNTRIES = frozenset({"cn", "hk"})


class NewsProvider(ABC):
    """Adapter for one upstream news API.

    Subclasses translate a CanonicalQuery into the provider's native
    request. attempt() runs that request and classifies the response
    into Usable or Failed; it never raises for provider or network errors.

    Attributes:
        name: Registered provider name
        label: Display name used in diagnostics
        default_base_url: API root used unless settings override it
        categories: Topics the provider's category filter accepts
        topic_queries: Topics rewritten as free-text expressions
        reshapes: Whether responses go through normalize() before relay
    """

    name: ClassVar[str]
    label: ClassVar[str]
    default_base_url: ClassVar[str]
    categories: ClassVar[frozenset[str]] = frozenset()
    topic_queries: ClassVar[dict[str, str]] = DEFAULT_TOPIC_QUERIES
    reshapes: ClassVar[bool] = False

    def __init__(self, settings: ProviderSettings, logger: logging.Logger | None = None):
        self.settings = settings
        self.logger = logger or get_logger(f"providers.{self.name}")

    @property
    def base_url(self) -> str:
        return (self.settings.base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    def build_request(self, query: CanonicalQuery) -> ProviderRequest:
        """Translate the canonical query into this provider's request.

        Args:
            query: The caller's filters

        Returns:
            ProviderRequest with endpoint URL, query params and headers
        """
        raise NotImplementedError

    def normalize(self, data: Any) -> Any:
        """Reshape a decoded payload into the canonical article list."""
        return data

    def error_detail(self, data: Any) -> str | None:
        """Extract a provider-supplied error code/message from a JSON body."""
        return None

    def topic_expression(self, topic: str) -> str:
        return self.topic_queries.get(topic, topic)

    def is_category(self, topic: str | None) -> bool:
        return bool(topic) and topic in self.categories

    def is_usable(self, status_code: int) -> bool:
        if 200 <= status_code < 300:
            return True
        if self.settings.failover_policy is FailoverPolicy.QUOTA_OR_AUTH:
            return status_code not in QUOTA_OR_AUTH_STATUSES
        return False

    async def attempt(self, query: CanonicalQuery, client: httpx.AsyncClient) -> ProviderOutcome:
        """Run one provider call and classify the result."""
        if not self.settings.available:
            return Failed(
                status_code=500,
                message=f"{self.label} API key is not configured",
                kind=FailureKind.CONFIGURATION,
            )

        outbound = self.build_request(query)
        request = client.build_request(
            "GET", outbound.url, params=outbound.params, headers=outbound.headers
        )
        self.logger.debug("GET %s", redact_url(str(request.url)))

        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            return Failed(
                status_code=503,
                message=f"{self.label} network failure ({type(exc).__name__})",
                kind=FailureKind.TRANSPORT,
            )

        if self.is_usable(response.status_code):
            if self.reshapes and 200 <= response.status_code < 300:
                return await self._reshape(response)
            return Usable(
                status_code=response.status_code,
                headers=dict(response.headers),
                payload=response.aiter_bytes(),
                close=response.aclose,
            )

        try:
            body = await response.aread()
        except httpx.HTTPError:
            body = b""
        finally:
            await response.aclose()
        return Failed(
            status_code=response.status_code,
            message=self._rejection_message(response.status_code, body),
            kind=FailureKind.REJECTION,
        )

    async def _reshape(self, response: httpx.Response) -> ProviderOutcome:
        try:
            body = await response.aread()
            data = json.loads(body)
        except (httpx.HTTPError, ValueError) as exc:
            return Failed(
                status_code=502,
                message=f"{self.label} returned an unreadable payload ({type(exc).__name__})",
                kind=FailureKind.REJECTION,
            )
        finally:
            await response.aclose()

        payload = json.dumps(self.normalize(data), ensure_ascii=False).encode("utf-8")
        headers = dict(response.headers)
        headers["content-type"] = "application/json; charset=utf-8"
        return Usable.from_bytes(response.status_code, headers, payload)

    def _rejection_message(self, status_code: int, body: bytes) -> str:
        detail = None
        try:
            detail = self.error_detail(json.loads(body))
        except ValueError:
            pass
        if detail:
            return f"{self.label} error ({status_code}): {truncate_text(detail)}"
        return f"{self.label} error ({status_code})"
