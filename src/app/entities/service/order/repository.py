"""Order repository for data access operations."""

from typing import Any

from sqlalchemy import delete, update
from sqlmodel import Session, col, select

from .entity import Order
from .schemas import GetOrdersFilter
from .table import OrderTable


class OrderRepository:
    """Data-access layer for orders.

    Each method issues a single statement against the ``orders`` table.
    Transaction boundaries belong to the caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, values: dict[str, Any]) -> Order:
        row = OrderTable(**values)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Order.model_validate(row, from_attributes=True)

    def get(self, order_id: int) -> Order | None:
        row = self._session.get(OrderTable, order_id)
        if row is None:
            return None
        return Order.model_validate(row, from_attributes=True)

    def list(self, filters: GetOrdersFilter) -> list[Order]:
        statement = select(OrderTable)
        if filters.email:
            statement = statement.where(OrderTable.email == filters.email)
        if filters.product_name:
            statement = statement.where(
                col(OrderTable.product_name).icontains(
                    filters.product_name, autoescape=True
                )
            )
        statement = (
            statement.order_by(col(OrderTable.id))
            .limit(filters.limit)
            .offset(filters.offset)
        )
        rows = self._session.exec(statement).all()
        return [Order.model_validate(row, from_attributes=True) for row in rows]

    def update(self, order_id: int, changes: dict[str, Any]) -> Order | None:
        """Apply `changes` to the order and return it, or None if it does not exist."""
        statement = (
            update(OrderTable)
            .where(col(OrderTable.id) == order_id)
            .values(**changes)
            .returning(OrderTable)
        )
        row = self._session.exec(statement).scalars().first()
        if row is None:
            return None
        return Order.model_validate(row, from_attributes=True)

    def delete(self, order_id: int) -> bool:
        statement = delete(OrderTable).where(col(OrderTable.id) == order_id)
        result = self._session.exec(statement)
        return result.rowcount > 0
