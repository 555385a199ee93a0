"""Shopfront Gateway — FastAPI application factory for the edge tier.

Invariants:
    - GET /health answers from process state only; it never calls the upstream
    - Every method on the API prefix itself and under it is relayed 1:1 by UpstreamProxy
    - No payload validation happens here
    - The httpx client is opened in the lifespan and closed after in-flight requests finish
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from shopfront.api.error_handlers import register_error_handlers
from shopfront.api.middleware import RequestLoggingMiddleware
from shopfront.config import GatewaySettings, get_gateway_settings
from shopfront.core.errors import UpstreamUnavailable
from shopfront.gateway.proxy import RELAYED_RESPONSE_HEADERS, UpstreamProxy, select_headers
from shopfront.infrastructure.observability import setup_logging
from shopfront.schemas.health import GatewayHealthResponse

logger = logging.getLogger(__name__)

RELAYED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: GatewaySettings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    if app.state.proxy is not None:
        yield
        return
    async with httpx.AsyncClient(
        base_url=settings.gateway_upstream_url,
        timeout=settings.gateway_timeout_seconds,
    ) as client:
        app.state.proxy = UpstreamProxy(client)
        logger.info(
            f"Shopfront gateway started, upstream {settings.gateway_upstream_url}",
            extra={"upstream": settings.gateway_upstream_url},
        )
        try:
            yield
        finally:
            logger.info("Shopfront gateway shutting down")
            app.state.proxy = None


def get_proxy(request: Request) -> UpstreamProxy:
    proxy = request.app.state.proxy
    if proxy is None:
        raise UpstreamUnavailable(request.app.state.settings.gateway_upstream_url, 503)
    return proxy


async def gateway_health():
    """Gateway liveness. Independent of the upstream and the store."""
    return GatewayHealthResponse(ok=True)


async def relay(request: Request, proxy: UpstreamProxy = Depends(get_proxy)):
    """Forward the request to the product service and relay its answer."""
    upstream = await proxy.forward(
        request.method,
        request.url.path,
        request.url.query,
        request.headers,
        await request.body(),
    )
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=select_headers(upstream.headers, RELAYED_RESPONSE_HEADERS),
    )


def create_gateway_app(
    settings: GatewaySettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the gateway. A caller-supplied client is used as-is and not closed."""
    settings = settings or get_gateway_settings()

    app = FastAPI(
        title="Shopfront Gateway",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.proxy = (
        UpstreamProxy(client) if client is not None else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_api_route(
        "/health", gateway_health,
        methods=["GET"], response_model=GatewayHealthResponse, tags=["health"],
    )
    prefix = settings.gateway_api_prefix.rstrip("/")
    relayed_paths = [prefix + "/{path:path}"]
    if prefix:
        relayed_paths.append(prefix)
    for relayed_path in relayed_paths:
        app.add_api_route(
            relayed_path, relay,
            methods=RELAYED_METHODS, include_in_schema=False,
        )

    register_error_handlers(app)
    return app
