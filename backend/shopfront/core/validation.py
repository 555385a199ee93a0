"""Request Validation — ordered guard rules for the product write and list paths.

Invariants:
    - validate_create is PURE: returns an outcome, never raises, never touches the store
    - Rules run in a fixed order; the first failing rule is the one reported
    - Accepted carries the sanitized name and the price rounded half-up to 2 decimals
    - Fault is reserved for unexpected conditions and never carries a user-facing message

Design Decisions:
    - Result types over exceptions: the route maps Rejected → 400 with the rule's
      message and Fault → 400 with a generic message, so the two cannot be confused
    - Rounding goes through Decimal(str(price)): 19.999 → 20.00, 1.005 → 1.01
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping

from shopfront.core.domain_types import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PAGE_LIMIT_MAX,
    PAGE_LIMIT_MIN,
    PRICE_MAX,
    NewProduct,
    PaginationParams,
)
from shopfront.core.sanitize import sanitize

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Accepted:
    payload: NewProduct


@dataclass(frozen=True)
class Rejected:
    message: str
    field: str


@dataclass(frozen=True)
class Fault:
    """Validation could not run to completion. detail is for logs only."""
    detail: str


ValidationOutcome = Accepted | Rejected | Fault


def validate_create(body: Any) -> ValidationOutcome:
    """Run the product creation rules against a decoded JSON body."""
    try:
        return _check_create(body)
    except Exception as e:
        logger.error(f"Product validation fault: {e!r}", exc_info=True)
        return Fault(detail=repr(e))


def _check_create(body: Any) -> ValidationOutcome:
    fields: Mapping[str, Any] = body if isinstance(body, Mapping) else {}

    name = fields.get("name")
    if _is_blank(name):
        return Rejected("name required", "name")
    if not isinstance(name, str):
        return Rejected("name must be a string", "name")

    clean_name = sanitize(name)
    if not clean_name:
        return Rejected("name cannot be empty", "name")
    if len(clean_name) < NAME_MIN_LENGTH:
        return Rejected("name too short", "name")
    if len(clean_name) > NAME_MAX_LENGTH:
        return Rejected("name too long", "name")

    price = fields.get("price")
    if price is None:
        return Rejected("price required", "price")
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return Rejected("price must be a number", "price")
    if isinstance(price, float) and math.isnan(price):
        return Rejected("price invalid", "price")
    if price < 0:
        return Rejected("price must be non-negative", "price")
    if price > PRICE_MAX:
        return Rejected("price exceeds maximum", "price")

    return Accepted(NewProduct(name=clean_name, price=round_price(price)))


def _is_blank(value: Any) -> bool:
    """Absent-like scalars: null, false, "", 0 and NaN. Empty lists and
    objects are present values and fall through to the type check."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def round_price(price: int | float) -> float:
    """Round half-up to cents on the number's decimal representation."""
    return float(Decimal(str(price)).quantize(_CENT, rounding=ROUND_HALF_UP))


# ─── Pagination ──────────────────────────────────────────────────

def validate_pagination(
    limit: str | None, skip: str | None,
) -> PaginationParams | Rejected:
    """Parse raw query values. Out-of-range values are rejected, never clamped."""
    params = PaginationParams()

    if limit is not None:
        value = _parse_int(limit)
        if value is None or not PAGE_LIMIT_MIN <= value <= PAGE_LIMIT_MAX:
            return Rejected(
                f"limit must be an integer between {PAGE_LIMIT_MIN} and {PAGE_LIMIT_MAX}",
                "limit",
            )
        params = PaginationParams(limit=value, skip=params.skip)

    if skip is not None:
        value = _parse_int(skip)
        if value is None or value < 0:
            return Rejected("skip must be a non-negative integer", "skip")
        params = PaginationParams(limit=params.limit, skip=value)

    return params


def _parse_int(raw: str) -> int | None:
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)
