"""Input contracts for the order procedures.

Every model validates all of its fields in one pass, so a rejected input
reports each violated field in ``ValidationError.errors()``. Nothing here
touches the database.
"""

from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _check_email(value: str) -> str:
    # Syntax only; the address is kept exactly as given
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}") from e
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]
FullName = Annotated[str, Field(min_length=1, description="Full name is required")]
ShippingAddress = Annotated[
    str, Field(min_length=10, description="Complete shipping address is required")
]
PhoneNumber = Annotated[
    str, Field(min_length=10, description="Valid phone number is required")
]
ProductName = Annotated[str, Field(min_length=1, description="Product name is required")]
Quantity = Annotated[
    int, Field(gt=0, strict=True, description="Quantity must be a positive number")
]

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50


class CreateOrderInput(BaseModel):
    """Fields required to place a new order."""

    model_config = ConfigDict(extra="forbid")

    full_name: FullName
    email: EmailAddress
    shipping_address: ShippingAddress
    phone_number: PhoneNumber
    product_name: ProductName
    quantity: Quantity


class UpdateOrderInput(BaseModel):
    """Partial update of an existing order.

    Only `id` is required. A business field is either absent, and left
    untouched, or present and validated with the same rule as on creation.
    The defaults below are never validated, so an explicit ``null`` is
    rejected instead of being mistaken for "absent".
    """

    model_config = ConfigDict(extra="forbid")

    id: int = Field(strict=True)
    full_name: FullName = None  # type: ignore[assignment]
    email: EmailAddress = None  # type: ignore[assignment]
    shipping_address: ShippingAddress = None  # type: ignore[assignment]
    phone_number: PhoneNumber = None  # type: ignore[assignment]
    product_name: ProductName = None  # type: ignore[assignment]
    quantity: Quantity = None  # type: ignore[assignment]

    def changes(self) -> dict[str, Any]:
        """Return the business fields that were actually supplied."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "id"
        }


class GetOrdersFilter(BaseModel):
    """Optional predicates and pagination for listing orders."""

    model_config = ConfigDict(extra="forbid")

    email: EmailAddress | None = None
    product_name: str | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)
