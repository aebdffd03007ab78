"""Order handlers: validate, run one statement, map the result."""

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.app.core.exceptions import StorageError
from src.app.entities.service.order import (
    CreateOrderInput,
    GetOrdersFilter,
    Order,
    OrderRepository,
    UpdateOrderInput,
)

T = TypeVar("T")


class OrderService:
    """Implements the order procedures on top of a single database session.

    Inputs may be given as the validated models or as plain mappings; a
    mapping is validated first and raises ``pydantic.ValidationError``
    before the database is touched. Database failures are rolled back and
    re-raised as ``StorageError``.
    """

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._order_repo = OrderRepository(db_session)

    def _run(self, operation: str, work: Callable[[], T], *, write: bool) -> T:
        try:
            result = work()
            if write:
                self._db_session.commit()
            return result
        except SQLAlchemyError as e:
            self._db_session.rollback()
            logger.error(
                "Order {} failed",
                operation,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageError(operation) from e

    def create_order(self, data: CreateOrderInput | Mapping[str, Any]) -> Order:
        payload = CreateOrderInput.model_validate(data)
        order = self._run(
            "create",
            lambda: self._order_repo.create(payload.model_dump()),
            write=True,
        )
        logger.info("Created order {} for {}", order.id, order.email)
        return order

    def get_orders(
        self, filters: GetOrdersFilter | Mapping[str, Any] | None = None
    ) -> list[Order]:
        """List orders matching every given filter, ordered by id."""
        criteria = GetOrdersFilter.model_validate(filters or {})
        return self._run(
            "list", lambda: self._order_repo.list(criteria), write=False
        )

    def get_order_by_id(self, order_id: int) -> Order | None:
        return self._run(
            "get", lambda: self._order_repo.get(order_id), write=False
        )

    def update_order(self, data: UpdateOrderInput | Mapping[str, Any]) -> Order | None:
        """Apply a partial update.

        With nothing to change the stored order is returned untouched. Returns
        None when no order has the given id.
        """
        payload = UpdateOrderInput.model_validate(data)
        changes = payload.changes()
        if not changes:
            return self.get_order_by_id(payload.id)

        order = self._run(
            "update",
            lambda: self._order_repo.update(payload.id, changes),
            write=True,
        )
        if order is None:
            logger.info("Order {} not found for update", payload.id)
        else:
            logger.info("Updated order {} fields {}", order.id, sorted(changes))
        return order

    def delete_order(self, order_id: int) -> bool:
        """Delete the order; True only if a row was removed."""
        deleted = self._run(
            "delete", lambda: self._order_repo.delete(order_id), write=True
        )
        if deleted:
            logger.info("Deleted order {}", order_id)
        return deleted
