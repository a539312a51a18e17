"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: One upstream news provider (order in the list is priority)
- FetchConfig: Outbound HTTP settings shared by every provider call
- ServerConfig: Bind address for the gateway
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

Credentials never live in the YAML file by default; they are read from
environment variables (see get_api_key).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


MIN_API_KEY_LENGTH = 5

DEFAULT_API_KEY_ENVS = {
    "gnews": "GNEWS_API_KEY",
    "newsapi": "NEWS_API_KEY",
    "bing": "BING_NEWS_API_KEY",
}

FAILOVER_POLICIES = ("any_error", "quota_or_auth")


@dataclass
class ProviderConfig:
    """Configuration for a single upstream news provider.

    Attributes:
        name: Registered provider name ("gnews", "newsapi" or "bing")
        enabled: Whether the provider takes part in failover
        api_key_env: Environment variable holding the credential (defaults per provider)
        api_key: Optional inline credential (overrides env var)
        failover_policy: "any_error" fails over on any non-2xx status,
            "quota_or_auth" only on 403/429 and relays every other status
        base_url: Optional override of the provider API root
    """

    name: str = "gnews"
    enabled: bool = True
    api_key_env: str | None = None
    api_key: str | None = None
    failover_policy: str = "any_error"
    base_url: str | None = None


def _default_providers() -> list[ProviderConfig]:
    return [
        ProviderConfig(name="gnews"),
        ProviderConfig(name="newsapi"),
        ProviderConfig(name="bing"),
    ]


@dataclass
class FetchConfig:
    """Configuration for outbound provider calls.

    Attributes:
        timeout_seconds: Transport timeout per provider call
        trust_env: Whether to respect system proxy settings
        user_agent: Client identifier sent to every provider (NewsAPI rejects calls without one)
    """

    timeout_seconds: float = 20.0
    trust_env: bool = True
    user_agent: str = "news-aggregator-app-v1"


@dataclass
class ServerConfig:
    """Configuration for the HTTP gateway.

    Attributes:
        host: Interface to bind
        port: Port to listen on
    """

    host: str = "127.0.0.1"
    port: int = 8787


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file (needs a log directory)
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "news_relay.jsonl"
    directory: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    providers: list[ProviderConfig] = field(default_factory=_default_providers)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Mapping sections are merged key by key. The providers list is replaced
    as a whole, since its order defines failover priority.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "providers": [
            {
                "name": provider.name,
                "enabled": provider.enabled,
                "api_key_env": provider.api_key_env,
                "api_key": provider.api_key,
                "failover_policy": provider.failover_policy,
                "base_url": provider.base_url,
            }
            for provider in cfg.providers
        ],
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
        },
        "server": {
            "host": cfg.server.host,
            "port": cfg.server.port,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "directory": cfg.logging.directory,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    providers = []
    for item in data.get("providers") or []:
        # Shorthand: a bare name in YAML means defaults for that provider
        if isinstance(item, str):
            item = {"name": item}
        providers.append(ProviderConfig(**item))

    return AppConfig(
        providers=providers,
        fetch=FetchConfig(**data["fetch"]),
        server=ServerConfig(**data["server"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_key(cfg: ProviderConfig, provider_name: str | None = None) -> str | None:
    """Get API key from inline config or environment variable.

    provider_name is the registered name to look up the default env var
    under, for configs that name the provider by an alias.
    """
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    env_name = DEFAULT_API_KEY_ENVS.get(provider_name or cfg.name.lower().strip())
    if env_name is None:
        return None
    return os.getenv(env_name)


def is_plausible_api_key(api_key: str | None) -> bool:
    """Return True when a credential is present and long enough to be real."""
    if api_key is None:
        return False
    return len(api_key.strip()) >= MIN_API_KEY_LENGTH
