"""Product Store Adapter — persistence boundary for products.

Invariants:
    - create() only accepts NewProduct (an accepted validation outcome)
    - list() orders by created_at DESC (id DESC on ties), then applies skip and limit
    - Every store failure surfaces as StorageFault with no driver detail
    - The adapter never changes the connection phase; it only borrows sessions

Design Decisions:
    - listing() returns the Select statement unexecuted: each list() call re-runs it,
      so a listing is restartable and nothing is buffered between requests
"""

import logging
from typing import Sequence

from sqlalchemy import Select, select

from shopfront.core.domain_types import NewProduct
from shopfront.infrastructure.database import DatabaseSessionManager
from shopfront.models.product import Product

logger = logging.getLogger(__name__)


def listing(limit: int, skip: int) -> Select[tuple[Product]]:
    """Most recent first, then the page window."""
    return (
        select(Product)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .offset(skip)
        .limit(limit)
    )


class ProductStore:
    """Create and list products through the shared session manager."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def create(self, payload: NewProduct) -> Product:
        async with self._manager.session() as db:
            product = Product(name=payload.name, price=payload.price)
            db.add(product)
            await db.commit()
            await db.refresh(product)
        logger.info(
            f"Product created: {product.id}",
            extra={"product_id": str(product.id)},
        )
        return product

    async def list(self, limit: int, skip: int) -> Sequence[Product]:
        async with self._manager.session() as db:
            result = await db.execute(listing(limit, skip))
            return result.scalars().all()
