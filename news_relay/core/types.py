"""
Core data types for the news relay.

This module defines the fundamental data structures shared by the
providers, the orchestrator and the gateway:
- CanonicalQuery: The caller-facing filter set {country, topic, query}
- ProviderRequest: One outbound provider call (URL, params, headers)
- ProviderSettings: Immutable per-provider settings resolved at startup
- Usable / Failed: The outcome of a single provider attempt
- Success / AllFailed: The outcome of a whole failover run
- Article: Canonical article shape emitted by response normalizers
"""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Any, AsyncIterator, Awaitable, Callable


class FailureKind(str, enum.Enum):
    """Why a provider attempt could not be used."""

    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    REJECTION = "rejection"


class FailoverPolicy(str, enum.Enum):
    """Which non-2xx statuses make the orchestrator move on.

    ANY_ERROR fails over on every non-2xx status. QUOTA_OR_AUTH fails over
    only on 403/429 and relays every other status to the caller as-is.
    """

    ANY_ERROR = "any_error"
    QUOTA_OR_AUTH = "quota_or_auth"


QUOTA_OR_AUTH_STATUSES = frozenset({403, 429})


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class CanonicalQuery:
    """The three caller-facing filters.

    Blank values are treated as absent. Country and topic are lower-cased
    since they are enum-like tokens; the free-text query is kept verbatim.

    Attributes:
        country: Two-letter country code (e.g. "us", "cn")
        topic: Category token (e.g. "technology", "crypto")
        query: Free-text search
    """

    country: str | None = None
    topic: str | None = None
    query: str | None = None

    @classmethod
    def from_params(
        cls,
        country: str | None = None,
        topic: str | None = None,
        query: str | None = None,
    ) -> CanonicalQuery:
        country = _clean(country)
        topic = _clean(topic)
        return cls(
            country=country.lower() if country else None,
            topic=topic.lower() if topic else None,
            query=_clean(query),
        )


@dataclass(frozen=True)
class ProviderRequest:
    """A fully-resolved outbound GET request to a provider."""

    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderSettings:
    """Immutable per-provider settings validated once at startup.

    Attributes:
        name: Registered provider name
        api_key: Resolved credential, or None
        available: False when the credential is missing or implausibly short
        failover_policy: Status classification policy for this provider
        user_agent: Client identifier header value
        base_url: Optional override of the provider API root
    """

    name: str
    api_key: str | None
    available: bool
    failover_policy: FailoverPolicy = FailoverPolicy.ANY_ERROR
    user_agent: str = "news-aggregator-app-v1"
    base_url: str | None = None


async def _single_chunk(body: bytes) -> AsyncIterator[bytes]:
    yield body


@dataclass
class Usable:
    """A provider response suitable to relay to the caller.

    The payload is still an open stream for passthrough providers; the
    consumer must call aclose() once the body has been relayed.

    Attributes:
        status_code: Provider HTTP status
        headers: Provider response headers
        payload: Async iterator over the body bytes
        close: Hook releasing the underlying connection
    """

    status_code: int
    headers: dict[str, str]
    payload: AsyncIterator[bytes]
    close: Callable[[], Awaitable[None]] | None = None

    @classmethod
    def from_bytes(cls, status_code: int, headers: dict[str, str], body: bytes) -> Usable:
        return cls(status_code=status_code, headers=headers, payload=_single_chunk(body))

    async def read(self) -> bytes:
        """Drain the payload and release the stream."""
        try:
            chunks = [chunk async for chunk in self.payload]
        finally:
            await self.aclose()
        return b"".join(chunks)

    async def aclose(self) -> None:
        if self.close is not None:
            close, self.close = self.close, None
            await close()


@dataclass(frozen=True)
class Failed:
    """A provider attempt that must trigger failover.

    Attributes:
        status_code: Provider status, 503 for transport failures, 500 for missing credentials
        message: Human-readable diagnostic (never empty)
        kind: Failure category
    """

    status_code: int
    message: str
    kind: FailureKind = FailureKind.REJECTION

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Failed outcome requires a diagnostic message")


ProviderOutcome = Usable | Failed


@dataclass
class Success:
    """The first usable provider outcome of a failover run."""

    provider: str
    outcome: Usable

    @property
    def status_code(self) -> int:
        return self.outcome.status_code


@dataclass
class AllFailed:
    """Every provider failed; carries the diagnostics in attempt order."""

    failures: list[tuple[str, Failed]] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [failed.message for _, failed in self.failures]

    @property
    def message(self) -> str:
        if not self.failures:
            return "All news providers failed: no providers configured."
        return "All news providers failed: " + "; ".join(self.messages)

    @property
    def status_code(self) -> int:
        # 500 signals a deployment problem rather than an upstream outage
        if all(failed.kind is FailureKind.CONFIGURATION for _, failed in self.failures):
            return 500
        return 503


FinalOutcome = Success | AllFailed


@dataclass
class Article:
    """Canonical article shape.

    Attributes:
        title: The article headline
        description: Short summary or lede
        url: Link to the original article
        image_url: Optional image/thumbnail URL
        published_at: ISO 8601 publication timestamp as sent by the provider
        source_name: Publication name
    """

    title: str | None
    description: str | None
    url: str | None
    image_url: str | None = None
    published_at: str | None = None
    source_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "image": self.image_url,
            "publishedAt": self.published_at,
            "source": {"name": self.source_name},
        }
