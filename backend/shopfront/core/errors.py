"""Error Hierarchy — typed, categorized exceptions for every Shopfront failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are user-correctable; infrastructure errors (500-level) are opaque
    - to_response() produces the REST envelope shared by both tiers
    - Messages of infrastructure errors never carry driver or network detail

Design Decisions:
    - Single hierarchy with ShopfrontError base: one global handler per app catches all
    - ErrorContext carries request coordinates for logging only, never for the response body
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    PAYLOAD = "payload"
    DATABASE = "database"
    UPSTREAM = "upstream"
    AVAILABILITY = "availability"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request coordinates attached to an error for log correlation."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    path: str | None = None


class ShopfrontError(Exception):
    """Base exception for all Shopfront errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationRejection(ShopfrontError):
    """Request payload or query failed a validation rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["field"] = self.field
        return body


class InvalidRequestError(ShopfrontError):
    """Validation could not complete; detail stays in the logs."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "invalid request data", "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class PayloadTooLargeError(ShopfrontError):
    """Declared Content-Length exceeds the request size limit."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            "request payload too large", "PAYLOAD_TOO_LARGE", ErrorCategory.PAYLOAD,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit_bytes = limit_bytes


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFault(ShopfrontError):
    """Store unreachable or write rejected."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            "storage operation failed", "STORAGE_FAULT", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class UpstreamUnavailable(ShopfrontError):
    """Gateway could not reach the product service."""
    def __init__(
        self,
        upstream: str,
        http_status: int = 502,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "upstream service unavailable", "UPSTREAM_UNAVAILABLE",
            ErrorCategory.UPSTREAM, ErrorSeverity.CRITICAL, context, http_status,
        )
        self.upstream = upstream


class NotReadyError(ShopfrontError):
    """Store connection is not established yet (or was lost)."""
    def __init__(self, phase: str, context: ErrorContext | None = None):
        super().__init__(
            "service not ready", "NOT_READY", ErrorCategory.AVAILABILITY,
            ErrorSeverity.ERROR, context, 503,
        )
        self.phase = phase
