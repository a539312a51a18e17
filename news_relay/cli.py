"""
Command-line interface for the News Relay.

Uses Typer to provide `serve` (run the HTTP gateway) and `fetch`
(run one query through the provider chain). Supports loading .env
files for provider credentials.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
import typer
import uvicorn

from .config import AppConfig, load_config
from .core.types import CanonicalQuery, Success
from .fetcher import build_async_client
from .gateway import create_app
from .logging_utils import setup_logging
from .orchestrator import FailoverOrchestrator
from .providers.factory import create_providers

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    # Load environment variables from .env if available
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging)
    return cfg


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Run the news gateway.

    Args:
        config: Optional path to YAML config file
        host: Override server.host
        port: Override server.port
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    cfg = _load(config, log_level)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port

    console.print(f"News relay listening on http://{cfg.server.host}:{cfg.server.port}")
    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port)


@app.command()
def fetch(
    country: str | None = typer.Option(None, "--country", help="Two-letter country code."),
    topic: str | None = typer.Option(None, "--topic", help="Topic/category token."),
    q: str | None = typer.Option(None, "--q", "-q", help="Free-text search."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Run one query through the provider chain and report the result."""
    cfg = _load(config, log_level)
    query = CanonicalQuery.from_params(country=country, topic=topic, query=q)
    status, body = asyncio.run(_fetch_once(cfg, query))
    console.print(f"Status: {status}")
    console.print(body)
    if status >= 400:
        raise typer.Exit(code=1)


async def _fetch_once(cfg: AppConfig, query: CanonicalQuery) -> tuple[int, str]:
    providers = create_providers(cfg)
    async with build_async_client(cfg.fetch) as client:
        result = await FailoverOrchestrator(providers, client).handle(query)
        if isinstance(result, Success):
            body = await result.outcome.read()
            text = body.decode("utf-8", errors="replace")
            return result.status_code, f"[{result.provider}] {text}"
        return result.status_code, result.message


if __name__ == "__main__":
    app()
