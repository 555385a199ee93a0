"""HTTP Middleware — request logging and the payload size guard.

Invariants:
    - PayloadSizeLimitMiddleware answers 413 from the Content-Length header alone;
      the body is never read, so no field validation runs for oversized requests
    - A malformed Content-Length is passed through for the server to reject
    - RequestLoggingMiddleware logs method, path, status and duration for every request
"""

import logging
import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shopfront.core.domain_types import MAX_PAYLOAD_BYTES
from shopfront.core.errors import ErrorContext, PayloadTooLargeError

logger = logging.getLogger(__name__)


class PayloadSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds max_bytes."""

    def __init__(self, app, max_bytes: int = MAX_PAYLOAD_BYTES):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared is not None and declared.strip().isdigit():
            if int(declared) > self.max_bytes:
                exc = PayloadTooLargeError(
                    self.max_bytes,
                    ErrorContext(method=request.method, path=request.url.path),
                )
                logger.warning(
                    f"Payload too large: {declared} bytes",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "error_code": exc.code,
                    },
                )
                return JSONResponse(
                    status_code=exc.http_status, content=exc.to_response(),
                )
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        response: Response = await call_next(request)

        logger.info(
            f"{method} {path} - {response.status_code}",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return response
