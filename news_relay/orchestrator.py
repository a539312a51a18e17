"""
Failover orchestration across upstream news providers.

Providers are tried one at a time in configured priority order. The
first usable response wins and no later provider is called; every
failure is recorded so the caller can see which stage broke.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

import httpx

from .core.types import AllFailed, CanonicalQuery, FinalOutcome, ProviderOutcome, Success, Usable
from .logging_utils import get_logger, log_event


class Provider(Protocol):
    """What the orchestrator needs from a provider adapter."""

    name: str

    async def attempt(self, query: CanonicalQuery, client: httpx.AsyncClient) -> ProviderOutcome:
        ...


class FailoverOrchestrator:
    """Sequential failover over an immutable provider chain.

    Attributes:
        providers: Providers in priority order (first is preferred)
        client: Shared outbound HTTP client passed to each attempt
    """

    def __init__(
        self,
        providers: Sequence[Provider],
        client: httpx.AsyncClient,
        logger: logging.Logger | None = None,
    ):
        self.providers = tuple(providers)
        self.client = client
        self.logger = logger or get_logger("orchestrator")

    async def handle(self, query: CanonicalQuery) -> FinalOutcome:
        """Try each provider in order until one returns a usable response.

        Args:
            query: The caller's canonical filters

        Returns:
            Success with the first usable outcome, or AllFailed carrying
            every diagnostic in attempt order
        """
        result = AllFailed()
        for provider in self.providers:
            outcome = await provider.attempt(query, self.client)
            if isinstance(outcome, Usable):
                log_event(
                    self.logger,
                    f"Serving news from {provider.name}",
                    provider=provider.name,
                    status_code=outcome.status_code,
                    attempts=len(result.failures) + 1,
                )
                return Success(provider=provider.name, outcome=outcome)

            result.failures.append((provider.name, outcome))
            self.logger.warning(
                "%s failed: %s",
                provider.name,
                outcome.message,
                extra={
                    "provider": provider.name,
                    "status_code": outcome.status_code,
                    "failure_kind": outcome.kind.value,
                },
            )

        self.logger.error(result.message, extra={"status_code": result.status_code})
        return result
