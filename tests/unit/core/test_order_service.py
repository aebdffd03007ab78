"""Tests for the order handlers in OrderService."""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, func, select

from src.app.core.exceptions import StorageError
from src.app.core.services import OrderService
from src.app.entities.service.order import (
    CreateOrderInput,
    GetOrdersFilter,
    OrderRepository,
    OrderTable,
    UpdateOrderInput,
)


def _count_rows(session: Session) -> int:
    return session.exec(select(func.count()).select_from(OrderTable)).one()


class TestCreateOrder:
    """Test the create handler."""

    def test_create_order(self, order_service: OrderService, order_input):
        """Should store the order and stamp id and created_at."""
        before = datetime.now(UTC)
        order = order_service.create_order(order_input)
        after = datetime.now(UTC)

        assert order.id > 0
        assert order.full_name == "John Doe"
        assert order.email == "john.doe@example.com"
        assert order.shipping_address == "123 Main Street, Anytown, ST 12345"
        assert order.phone_number == "555-123-4567"
        assert order.product_name == "Test Product"
        assert order.quantity == 2
        assert before <= order.created_at <= after

    def test_accepts_validated_model(self, order_service: OrderService, order_input):
        """Should accept an already validated CreateOrderInput."""
        order = order_service.create_order(CreateOrderInput(**order_input))

        assert order.full_name == order_input["full_name"]

    def test_ids_increase(self, order_service: OrderService, make_order_input):
        """Should assign unique, increasing ids."""
        ids = [
            order_service.create_order(make_order_input(full_name=f"Customer {i}")).id
            for i in range(5)
        ]

        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_ids_not_reused_after_delete(
        self, order_service: OrderService, make_order_input
    ):
        """Should not hand out the id of the newest deleted order again."""
        order_service.create_order(make_order_input(full_name="First"))
        second = order_service.create_order(make_order_input(full_name="Second"))
        order_service.delete_order(second.id)

        third = order_service.create_order(make_order_input(full_name="Third"))

        assert third.id > second.id

    def test_email_stored_as_given(
        self, order_service: OrderService, make_order_input
    ):
        """Should store the email address without normalising it."""
        order = order_service.create_order(
            make_order_input(email="John.Doe@Example.COM")
        )

        assert order.email == "John.Doe@Example.COM"
        assert order_service.get_order_by_id(order.id).email == "John.Doe@Example.COM"

    def test_persists_order(
        self, order_service: OrderService, session: Session, order_input
    ):
        """Should write exactly one row."""
        order = order_service.create_order(order_input)

        rows = session.exec(select(OrderTable).where(OrderTable.id == order.id)).all()
        assert len(rows) == 1
        assert rows[0].product_name == "Test Product"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"quantity": 0},
            {"quantity": "3"},
            {"shipping_address": "Short"},
            {"phone_number": "123"},
            {"full_name": ""},
        ],
    )
    def test_invalid_input_writes_nothing(
        self, order_service: OrderService, session: Session, make_order_input, overrides
    ):
        """Should reject invalid input before touching the database."""
        with pytest.raises(ValidationError):
            order_service.create_order(make_order_input(**overrides))

        assert _count_rows(session) == 0

    def test_storage_failure_raises_storage_error(
        self, order_service: OrderService, order_input
    ):
        """Should wrap database failures in StorageError."""
        failure = OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))
        with patch.object(OrderRepository, "create", side_effect=failure):
            with pytest.raises(StorageError) as exc_info:
                order_service.create_order(order_input)

        assert exc_info.value.operation == "create"
        assert exc_info.value.__cause__ is failure


class TestGetOrderById:
    """Test the get-by-id handler."""

    def test_round_trip(self, order_service: OrderService, order_input):
        """Should return the order exactly as created."""
        created = order_service.create_order(order_input)

        fetched = order_service.get_order_by_id(created.id)

        assert fetched is not None
        assert fetched == created
        assert fetched.created_at == created.created_at

    def test_not_found(self, order_service: OrderService):
        """Should return None for an unknown id."""
        assert order_service.get_order_by_id(999) is None


class TestGetOrders:
    """Test the list/filter handler."""

    @pytest.fixture
    def seeded(self, order_service: OrderService, make_order_input):
        return [
            order_service.create_order(
                make_order_input(
                    full_name="John Doe",
                    email="john@example.com",
                    product_name="Laptop Computer",
                    quantity=1,
                )
            ),
            order_service.create_order(
                make_order_input(
                    full_name="Jane Smith",
                    email="jane@example.com",
                    product_name="Gaming Laptop",
                    quantity=2,
                )
            ),
            order_service.create_order(
                make_order_input(
                    full_name="John Doe",
                    email="john@example.com",
                    product_name="Wireless Mouse",
                    quantity=3,
                )
            ),
        ]

    def test_empty(self, order_service: OrderService):
        """Should return an empty list when there are no orders."""
        assert order_service.get_orders() == []

    def test_no_filters_returns_all_in_id_order(self, order_service: OrderService, seeded):
        """Should return every order ordered by id."""
        orders = order_service.get_orders()

        assert [order.id for order in orders] == [order.id for order in seeded]

    def test_filter_by_email(self, order_service: OrderService, seeded):
        """Should return only orders with the exact email."""
        orders = order_service.get_orders({"email": "john@example.com"})

        assert len(orders) == 2
        assert all(order.email == "john@example.com" for order in orders)

    def test_filter_by_product_name_is_case_insensitive_substring(
        self, order_service: OrderService, seeded
    ):
        """Should match product names case-insensitively by substring."""
        orders = order_service.get_orders(GetOrdersFilter(product_name="laptop"))

        assert {order.product_name for order in orders} == {
            "Laptop Computer",
            "Gaming Laptop",
        }

    def test_filters_compose_as_intersection(self, order_service: OrderService, seeded):
        """Should apply both filters together."""
        orders = order_service.get_orders(
            {"email": "john@example.com", "product_name": "Laptop"}
        )

        assert len(orders) == 1
        assert orders[0].id == seeded[0].id
        assert orders[0].full_name == "John Doe"
        assert orders[0].product_name == "Laptop Computer"

    def test_no_matches(self, order_service: OrderService, seeded):
        """Should return an empty list when nothing matches."""
        assert order_service.get_orders({"email": "nobody@example.com"}) == []

    def test_invalid_filter_rejected(self, order_service: OrderService):
        """Should reject a limit above the maximum page size."""
        with pytest.raises(ValidationError):
            order_service.get_orders({"limit": 101})

    def test_default_limit(self, order_service: OrderService, make_order_input):
        """Should return at most 50 orders by default."""
        for i in range(55):
            order_service.create_order(make_order_input(full_name=f"Customer {i}"))

        assert len(order_service.get_orders()) == 50

    @pytest.mark.parametrize("limit,offset", [(2, 0), (2, 2), (2, 4), (3, 1), (10, 3)])
    def test_pagination(
        self, order_service: OrderService, make_order_input, limit, offset
    ):
        """Should return disjoint pages of the expected size."""
        total = 5
        for i in range(total):
            order_service.create_order(make_order_input(full_name=f"Customer {i}"))

        page = order_service.get_orders({"limit": limit, "offset": offset})
        next_page = order_service.get_orders({"limit": limit, "offset": offset + limit})

        assert len(page) == max(0, min(limit, total - offset))
        assert not {order.id for order in page} & {order.id for order in next_page}


class TestUpdateOrder:
    """Test the update handler."""

    def test_update_several_fields(self, order_service: OrderService, order_input):
        """Should change the supplied fields and keep the rest."""
        created = order_service.create_order(order_input)

        updated = order_service.update_order(
            {
                "id": created.id,
                "full_name": "Jane Doe",
                "email": "jane.doe@example.com",
                "quantity": 5,
            }
        )

        assert updated is not None
        assert updated.id == created.id
        assert updated.full_name == "Jane Doe"
        assert updated.email == "jane.doe@example.com"
        assert updated.quantity == 5
        assert updated.shipping_address == created.shipping_address
        assert updated.phone_number == created.phone_number
        assert updated.product_name == created.product_name
        assert updated.created_at == created.created_at

    def test_partial_update_changes_only_quantity(
        self, order_service: OrderService, order_input
    ):
        """Should leave every other field untouched."""
        created = order_service.create_order(order_input)

        updated = order_service.update_order({"id": created.id, "quantity": 10})

        assert updated is not None
        assert updated.quantity == 10
        assert updated.model_dump(exclude={"quantity"}) == created.model_dump(
            exclude={"quantity"}
        )

    def test_update_is_persisted(self, order_service: OrderService, order_input):
        """Should make the update visible to later reads."""
        created = order_service.create_order(order_input)

        order_service.update_order(
            UpdateOrderInput(
                id=created.id,
                full_name="Updated Name",
                shipping_address="456 New Street, Different City, ST 67890",
            )
        )

        fetched = order_service.get_order_by_id(created.id)
        assert fetched is not None
        assert fetched.full_name == "Updated Name"
        assert fetched.shipping_address == "456 New Street, Different City, ST 67890"
        assert fetched.email == created.email
        assert fetched.quantity == created.quantity

    def test_no_op_update_returns_existing(
        self, order_service: OrderService, order_input
    ):
        """Should return the current order when no fields are supplied."""
        created = order_service.create_order(order_input)

        result = order_service.update_order({"id": created.id})

        assert result == created

    def test_not_found(self, order_service: OrderService):
        """Should return None for an unknown id."""
        assert order_service.update_order({"id": 999, "full_name": "Nobody"}) is None

    def test_no_op_not_found(self, order_service: OrderService):
        """Should return None for an empty update of an unknown id."""
        assert order_service.update_order({"id": 999}) is None

    def test_invalid_update_leaves_order_unchanged(
        self, order_service: OrderService, order_input
    ):
        """Should write nothing when any supplied field is invalid."""
        created = order_service.create_order(order_input)

        with pytest.raises(ValidationError):
            order_service.update_order(
                {"id": created.id, "full_name": "Valid Name", "quantity": 0}
            )

        assert order_service.get_order_by_id(created.id) == created


class TestDeleteOrder:
    """Test the delete handler."""

    def test_delete_is_idempotent(self, order_service: OrderService, order_input):
        """Should return True once, then False."""
        created = order_service.create_order(order_input)

        assert order_service.delete_order(created.id) is True
        assert order_service.delete_order(created.id) is False
        assert order_service.get_order_by_id(created.id) is None

    def test_delete_leaves_other_orders(
        self, order_service: OrderService, make_order_input
    ):
        """Should remove only the requested order."""
        first = order_service.create_order(make_order_input(full_name="First"))
        second = order_service.create_order(make_order_input(full_name="Second"))

        order_service.delete_order(first.id)

        assert [order.id for order in order_service.get_orders()] == [second.id]

    def test_not_found(self, order_service: OrderService):
        """Should return False for an unknown id."""
        assert order_service.delete_order(999) is False

    def test_storage_failure_rolls_back(self, order_service: OrderService, session):
        """Should roll back the session when the database fails."""
        failure = OperationalError("DELETE FROM orders", {}, Exception("locked"))
        with patch.object(OrderRepository, "delete", side_effect=failure):
            with patch.object(session, "rollback", wraps=session.rollback) as rollback:
                with pytest.raises(StorageError):
                    order_service.delete_order(1)

        rollback.assert_called_once()
