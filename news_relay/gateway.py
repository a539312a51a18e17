"""
HTTP gateway in front of the failover orchestrator.

Accepts `GET /?country=&topic=&q=` on any path, runs the provider chain
and relays the winning provider's status and body. Provider headers are
rewritten for cross-origin browser use and stripped of framing headers
that no longer match the re-streamed body.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator, Mapping

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from .config import AppConfig, load_config
from .core.types import AllFailed, CanonicalQuery, Success
from .fetcher import build_async_client
from .logging_utils import get_logger, log_event
from .orchestrator import FailoverOrchestrator
from .providers.factory import create_providers


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, HEAD, POST, OPTIONS",
}

STRIPPED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


def parse_query(params: Mapping[str, str]) -> CanonicalQuery:
    """Extract the canonical filters from inbound query parameters."""
    return CanonicalQuery.from_params(
        country=params.get("country"),
        topic=params.get("topic"),
        query=params.get("q"),
    )


def relay_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Rewrite provider response headers for the relayed response."""
    relayed = {
        key: value
        for key, value in headers.items()
        if key.lower() not in STRIPPED_HEADERS and not key.lower().startswith("access-control-")
    }
    relayed.update(CORS_HEADERS)
    return relayed


def build_response(success: Success) -> StreamingResponse:
    outcome = success.outcome
    return StreamingResponse(
        outcome.payload,
        status_code=outcome.status_code,
        headers=relay_headers(outcome.headers),
        background=BackgroundTask(outcome.aclose),
    )


def build_error_response(failure: AllFailed) -> JSONResponse:
    return JSONResponse(
        {"errors": [{"message": failure.message}]},
        status_code=failure.status_code,
        headers={"Access-Control-Allow-Origin": "*"},
    )


def create_app(
    cfg: AppConfig | None = None,
    orchestrator: FailoverOrchestrator | None = None,
    logger: logging.Logger | None = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        cfg: Application config; defaults are used when omitted
        orchestrator: Pre-built orchestrator (tests inject stub providers here).
            When omitted, the provider chain and HTTP client are built on
            startup and the client is closed on shutdown.
        logger: Logger for request events

    Returns:
        FastAPI application
    """
    cfg = cfg or load_config(None)
    logger = logger or get_logger("gateway")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if orchestrator is not None:
            yield
            return
        providers = create_providers(cfg, logger)
        async with build_async_client(cfg.fetch) as client:
            app.state.orchestrator = FailoverOrchestrator(providers, client)
            yield

    app = FastAPI(title="News Relay", version="0.1.0", lifespan=lifespan)
    if orchestrator is not None:
        app.state.orchestrator = orchestrator

    # Browser preflights are answered by the middleware; bare OPTIONS falls through.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    @app.api_route("/{path:path}", methods=["GET", "HEAD"])
    async def relay(request: Request, path: str) -> Response:
        query = parse_query(request.query_params)
        result = await request.app.state.orchestrator.handle(query)
        if isinstance(result, Success):
            log_event(
                logger,
                "Relayed provider response",
                provider=result.provider,
                status_code=result.status_code,
                country=query.country,
                topic=query.topic,
            )
            return build_response(result)
        return build_error_response(result)

    return app
