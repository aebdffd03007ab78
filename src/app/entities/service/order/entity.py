"""Entity: Order."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .schemas import EmailAddress


class Order(BaseModel):
    """Order entity representing one customer purchase request.

    This is the domain model returned by every order procedure. It is built
    from an `OrderTable` row and is never persisted directly.
    """

    id: int = Field(description="Database-assigned identifier")
    full_name: str = Field(description="Customer's full name")
    email: EmailAddress = Field(description="Customer's email address")
    shipping_address: str = Field(description="Shipping address")
    phone_number: str = Field(description="Customer's phone number")
    product_name: str = Field(description="Ordered product")
    quantity: int = Field(gt=0, description="Number of items ordered")
    created_at: datetime = Field(description="When the order was created (UTC)")

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Order):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash((self.id, self.created_at))
