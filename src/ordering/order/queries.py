"""Order lookups — read-only queries over the order store."""

from dataclasses import dataclass

from ordering.order.order import Order
from ordering.order.repository import OrderRepository


@dataclass(frozen=True)
class GetOrder:
    order_id: str


@dataclass(frozen=True)
class GetUserOrders:
    user_id: str


class GetOrderHandler:
    """Loads an order with its items, raising NotFoundError when it does not exist."""

    def __init__(self, orders: OrderRepository) -> None:
        self.orders = orders

    def handle(self, query: GetOrder) -> Order:
        return self.orders.get(query.order_id)


class GetUserOrdersHandler:
    """Lists a user's orders, newest first."""

    def __init__(self, orders: OrderRepository) -> None:
        self.orders = orders

    def handle(self, query: GetUserOrders) -> list[Order]:
        return self.orders.list_for_user(query.user_id)
