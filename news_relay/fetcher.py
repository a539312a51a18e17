"""
Shared outbound HTTP client.

One httpx.AsyncClient is shared by every provider call so connections
are pooled across requests. It carries no per-request state.
"""

from __future__ import annotations

import httpx

from .config import FetchConfig


def build_async_client(cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the provider-facing client.

    Args:
        cfg: Outbound fetch settings (timeout, proxy trust, client identifier)
        transport: Optional transport override (e.g. httpx.MockTransport in tests)

    Returns:
        Configured httpx.AsyncClient; the caller owns closing it
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(cfg.timeout_seconds),
        headers={"User-Agent": cfg.user_agent},
        follow_redirects=True,
        trust_env=cfg.trust_env,
        transport=transport,
    )
