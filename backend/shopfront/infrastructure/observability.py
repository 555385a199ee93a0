"""Structured Logging — JSON formatter and setup for both tiers.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Request fields (method, path, status_code, duration_ms) surfaced when present
    - A record carrying a ShopfrontError (extra={"fault": exc}) gets an "error" object:
      code, category, severity, http_status and the ErrorContext it was raised with
    - Values the json module cannot encode (UUID, Enum, datetime, dataclass) are
      rendered instead of raising inside the logging call
    - JSON format in production, human-readable in development

Design Decisions:
    - The handler passes the exception object, not pre-flattened fields, so the
      error shape lives in one place (describe_fault)
"""

import dataclasses
import json
import logging
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from shopfront.core.errors import ShopfrontError

_EXTRA_FIELDS = (
    "method", "path", "status_code", "duration_ms",
    "error_code", "upstream", "product_id", "phase",
)


def describe_fault(exc: ShopfrontError) -> dict:
    """Log-side view of a domain error. Carries the context the response omits."""
    fault = {
        "code": exc.code,
        "category": exc.category.value,
        "severity": exc.severity.value,
        "http_status": exc.http_status,
        "context": {
            key: value for key, value in dataclasses.asdict(exc.context).items()
            if value is not None
        },
    }
    field = getattr(exc, "field", None)
    if field:
        fault["field"] = field
    return fault


def _encode(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return repr(value)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        fault = record.__dict__.get("fault")
        if isinstance(fault, ShopfrontError):
            log["error"] = describe_fault(fault)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=_encode)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines; appends [CODE] when the record carries a fault."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fault = record.__dict__.get("fault")
        if isinstance(fault, ShopfrontError):
            line = f"{line} [{fault.code}]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ConsoleFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
