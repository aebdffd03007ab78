"""Entity package: Order."""

from .entity import Order
from .repository import OrderRepository
from .schemas import CreateOrderInput, GetOrdersFilter, UpdateOrderInput
from .table import OrderTable

__all__ = [
    "Order",
    "OrderRepository",
    "OrderTable",
    "CreateOrderInput",
    "UpdateOrderInput",
    "GetOrdersFilter",
]
