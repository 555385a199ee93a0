"""Products — create and list catalog entries.

Invariants:
    - The raw body goes through validate_create before any store access
    - Only the normalized NewProduct reaches ProductStore.create
    - Rejected → 400 with the failing rule's message; Fault → 400 with a generic message
    - Pagination values are rejected when invalid, never clamped or defaulted

Design Decisions:
    - Body typed as Any: rule order and messages belong to core/validation.py,
      not to Pydantic coercion
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, status

from shopfront.core.errors import (
    ErrorContext, InvalidRequestError, ValidationRejection,
)
from shopfront.core.validation import (
    Fault, Rejected, validate_create, validate_pagination,
)
from shopfront.infrastructure.database import DatabaseSessionManager, require_ready
from shopfront.infrastructure.product_store import ProductStore
from shopfront.schemas.product import ErrorResponse, ProductResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    413: {"model": ErrorResponse, "description": "Payload too large"},
    500: {"model": ErrorResponse, "description": "Storage fault"},
    503: {"model": ErrorResponse, "description": "Store not ready"},
}


def get_product_store(
    manager: DatabaseSessionManager = Depends(require_ready),
) -> ProductStore:
    return ProductStore(manager)


def _context(request: Request) -> ErrorContext:
    return ErrorContext(method=request.method, path=request.url.path)


@router.post(
    "", response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_product(
    request: Request,
    body: Any = Body(None),
    store: ProductStore = Depends(get_product_store),
):
    """Create a product from a validated, sanitized payload."""
    outcome = validate_create(body)
    if isinstance(outcome, Rejected):
        raise ValidationRejection(outcome.message, outcome.field, _context(request))
    if isinstance(outcome, Fault):
        raise InvalidRequestError(_context(request))

    product = await store.create(outcome.payload)
    return ProductResponse.from_model(product)


@router.get(
    "", response_model=list[ProductResponse],
    responses=_ERROR_RESPONSES,
)
async def list_products(
    request: Request,
    limit: str | None = Query(None, description="Page size, 1-100 (default 100)"),
    skip: str | None = Query(None, description="Entries to skip, >= 0 (default 0)"),
    store: ProductStore = Depends(get_product_store),
):
    """List products, most recent first."""
    params = validate_pagination(limit, skip)
    if isinstance(params, Rejected):
        raise ValidationRejection(params.message, params.field, _context(request))

    products = await store.list(params.limit, params.skip)
    return [ProductResponse.from_model(p) for p in products]
