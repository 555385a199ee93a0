"""Product ORM — persisted catalog entry.

Invariants:
    - id is a UUID assigned on insert, never updated
    - name is already sanitized and 3-100 chars when it reaches this table
    - price is non-negative, at most 999999.99, two decimal places
    - created_at is assigned once at insert (UTC) and drives list ordering;
      id breaks ties so a page boundary never splits rows inconsistently
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shopfront.db.base import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_created_at", "created_at", "id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(
        Numeric(9, 2, asdecimal=False), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
