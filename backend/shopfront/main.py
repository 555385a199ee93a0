"""Shopfront Product Service — FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ShopfrontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store connected in the lifespan before the server accepts traffic, and
      disconnected only after in-flight requests have completed
    - health_mode fixed on app.state at construction time

Design Decisions:
    - Factory over module-level app: settings are validated by the caller, so a
      missing variable fails startup instead of import
    - Middleware order (outermost first): request log, size guard, CORS
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopfront.api.error_handlers import register_error_handlers
from shopfront.api.middleware import PayloadSizeLimitMiddleware, RequestLoggingMiddleware
from shopfront.api.routes import health, products
from shopfront.config import ServiceSettings, get_service_settings
from shopfront.infrastructure.database import DatabaseSessionManager
from shopfront.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: ServiceSettings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.db_manager = manager
    await manager.connect()
    logger.info(
        f"Shopfront service started (health mode: {settings.health_mode.value})",
    )
    try:
        yield
    finally:
        logger.info("Shopfront service shutting down")
        await manager.disconnect()


def create_app(settings: ServiceSettings | None = None) -> FastAPI:
    settings = settings or get_service_settings()

    app = FastAPI(
        title="Shopfront Product API",
        description="Validated product catalog with store health reporting",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.health_mode = settings.health_mode
    app.state.db_manager = None

    # add_middleware prepends: last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PayloadSizeLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router)
    app.include_router(products.router)

    register_error_handlers(app)
    return app
