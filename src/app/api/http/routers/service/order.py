"""Order procedures exposed over HTTP.

Each procedure is mounted under its own name. Queries are GET requests
taking their input from the query string; mutations are POST requests
taking a JSON body. A missing order is reported as ``null`` (or ``false``
for deletes) with status 200.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query

from src.app.api.http.deps import get_order_service
from src.app.core.services import OrderService
from src.app.entities.service.order import (
    CreateOrderInput,
    GetOrdersFilter,
    Order,
    UpdateOrderInput,
)

router = APIRouter(tags=["orders"])


@router.post("/createOrder", response_model=Order)
def create_order(
    payload: CreateOrderInput,
    order_service: OrderService = Depends(get_order_service),
) -> Order:
    """Create a new order."""
    return order_service.create_order(payload)


@router.get("/getOrders", response_model=list[Order])
def get_orders(
    filters: Annotated[GetOrdersFilter, Query()],
    order_service: OrderService = Depends(get_order_service),
) -> list[Order]:
    """List orders, optionally filtered by email and product name."""
    return order_service.get_orders(filters)


@router.get("/getOrderById", response_model=Order | None)
def get_order_by_id(
    order_id: Annotated[int, Query(alias="id")],
    order_service: OrderService = Depends(get_order_service),
) -> Order | None:
    """Get an order by ID."""
    return order_service.get_order_by_id(order_id)


@router.post("/updateOrder", response_model=Order | None)
def update_order(
    payload: UpdateOrderInput,
    order_service: OrderService = Depends(get_order_service),
) -> Order | None:
    """Update the supplied fields of an order."""
    return order_service.update_order(payload)


@router.post("/deleteOrder")
def delete_order(
    order_id: Annotated[int, Body()],
    order_service: OrderService = Depends(get_order_service),
) -> bool:
    """Delete an order."""
    return order_service.delete_order(order_id)
