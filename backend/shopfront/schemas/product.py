"""Product Schemas — response contracts for the product endpoints.

Invariants:
    - Request bodies are NOT modelled here: the write path is guarded by
      core/validation.py so every rule reports its own message in order
    - Wire names are camelCase (createdAt); Python attributes stay snake_case
    - createdAt always carries a UTC offset
"""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopfront.models.product import Product


class ProductResponse(BaseModel):
    """Public product representation."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str
    price: float
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite drops the offset on read; stored values are always UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_model(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            created_at=product.created_at,
        )


class ErrorBody(BaseModel):
    code: str
    message: str
    category: str
    severity: str
    timestamp: str | None = None
    field: str | None = None


class ErrorResponse(BaseModel):
    """Envelope produced by ShopfrontError.to_response()."""
    error: ErrorBody
