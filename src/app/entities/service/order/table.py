"""Order database table model."""

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class OrderTable(SQLModel, table=True):
    """Database persistence model for orders.

    This represents how the Order entity is stored in the database.
    `id` is assigned by the database on insert and `created_at` is stamped
    once when the row is created; neither is ever written by an update.
    """

    __tablename__ = "orders"
    # Ids are never reused, even after the newest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    full_name: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    email: str = Field(sa_column=sa.Column(sa.Text, nullable=False, index=True))
    shipping_address: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    phone_number: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    product_name: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    quantity: int = Field(sa_column=sa.Column(sa.Integer, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=sa.Column(
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
