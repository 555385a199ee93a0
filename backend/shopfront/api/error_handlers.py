"""Error Handlers — global exception handlers shared by the service and the gateway.

Invariants:
    - ShopfrontError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level details
    - Exception (catch-all) → 500, never leaks internal details
    - Every handled fault is logged with method and path

Design Decisions:
    - Three-layer handler: domain (ShopfrontError), validation (Pydantic), catch-all (Exception)
    - 400-level errors log at WARNING, 500-level at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shopfront.core.errors import ShopfrontError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_shopfront_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _request_fields(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}


def _register_shopfront_error_handler(app: FastAPI) -> None:
    """Register Shopfront domain/infrastructure error handler."""

    @app.exception_handler(ShopfrontError)
    async def shopfront_error_handler(request: Request, exc: ShopfrontError):
        """Handle all Shopfront domain/infrastructure errors."""
        exc.context.method = request.method
        exc.context.path = request.url.path
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"ShopfrontError: {exc.message}",
            extra={"error_code": exc.code, "fault": exc, **_request_fields(request)},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle malformed JSON and query/path type errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", **_request_fields(request)},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", **_request_fields(request)},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
