"""Provider factory and registry for the failover chain."""

from __future__ import annotations

import logging

from ..config import (
    FAILOVER_POLICIES,
    AppConfig,
    FetchConfig,
    ProviderConfig,
    get_api_key,
    is_plausible_api_key,
)
from ..core.types import FailoverPolicy, ProviderSettings
from .base import NewsProvider
from .bing import BingNewsProvider
from .gnews import GNewsProvider
from .newsapi import NewsAPIProvider


ProviderBuilder = type[NewsProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "gnews": GNewsProvider,
    "newsapi": NewsAPIProvider,
    "news_api": NewsAPIProvider,
    "bing": BingNewsProvider,
    "bing_news": BingNewsProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def resolve_settings(
    provider_cfg: ProviderConfig,
    fetch_cfg: FetchConfig,
    provider_name: str | None = None,
) -> ProviderSettings:
    """Validate one provider's configuration and resolve its credential."""
    name = provider_name or provider_cfg.name.lower().strip()
    policy = provider_cfg.failover_policy.lower().strip()
    if policy not in FAILOVER_POLICIES:
        supported = ", ".join(FAILOVER_POLICIES)
        raise ValueError(
            f"Unsupported failover policy for {provider_cfg.name}: "
            f"{provider_cfg.failover_policy}. Supported: {supported}"
        )
    api_key = get_api_key(provider_cfg, name)
    return ProviderSettings(
        name=name,
        api_key=api_key,
        available=is_plausible_api_key(api_key),
        failover_policy=FailoverPolicy(policy),
        user_agent=fetch_cfg.user_agent,
        base_url=provider_cfg.base_url,
    )


def create_provider(provider_cfg: ProviderConfig, fetch_cfg: FetchConfig) -> NewsProvider:
    """Build a provider instance from runtime config."""
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    return builder(resolve_settings(provider_cfg, fetch_cfg, builder.name))


def create_providers(
    cfg: AppConfig,
    logger: logging.Logger | None = None,
) -> tuple[NewsProvider, ...]:
    """Build the ordered, read-only provider chain.

    Disabled providers are skipped. Providers without a plausible
    credential stay in the chain and fail fast with a configuration
    diagnostic, so operators can see which key is missing.
    """
    providers = tuple(
        create_provider(provider_cfg, cfg.fetch)
        for provider_cfg in cfg.providers
        if provider_cfg.enabled
    )
    if not providers:
        raise ValueError("No news providers enabled")

    if logger is not None:
        for provider in providers:
            if not provider.settings.available:
                logger.warning("%s is unavailable: API key missing or too short", provider.label)
    return providers
