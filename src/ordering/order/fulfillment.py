"""Order fulfillment — commands and handlers.

Moves a paid order through processing, shipment and delivery.
"""

import structlog
from protean.fields import Identifier, String

from ordering.domain import ordering
from ordering.exceptions import InvalidTransitionError
from ordering.order.order import Order, OrderStatus
from ordering.order.repository import OrderRepository
from ordering.outbox import EventOutbox

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class StartProcessing:
    """Signal that the print shop has started producing the order."""

    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ShipOrder:
    """Record that the order left with a carrier."""

    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)


@ordering.command(part_of="Order")
class DeliverOrder:
    """Record that the carrier confirmed delivery."""

    order_id = Identifier(required=True)


class _FulfillmentHandler:
    def __init__(self, orders: OrderRepository, outbox: EventOutbox) -> None:
        self.orders = orders
        self.outbox = outbox

    def _save(self, order: Order) -> Order:
        self.orders.save_status(order)
        self.outbox.collect(order)
        return order


class StartProcessingHandler(_FulfillmentHandler):
    def handle(self, command: StartProcessing) -> Order:
        order = self.orders.get(command.order_id)
        order.start_processing()
        logger.info("Order processing started", order_id=str(order.id))
        return self._save(order)


class ShipOrderHandler(_FulfillmentHandler):
    """Ships a confirmed or processing order.

    A confirmed order is moved through processing first, so it records both
    transitions.
    """

    def handle(self, command: ShipOrder) -> Order:
        order = self.orders.get(command.order_id)
        if order.status not in (OrderStatus.CONFIRMED.value, OrderStatus.PROCESSING.value):
            raise InvalidTransitionError(
                f"Order must be confirmed or processing to ship (current status: {order.status})"
            )

        if order.status == OrderStatus.CONFIRMED.value:
            order.start_processing()
        order.ship(command.tracking_number)

        logger.info("Order shipped", order_id=str(order.id), tracking_number=order.tracking_number)
        return self._save(order)


class DeliverOrderHandler(_FulfillmentHandler):
    def handle(self, command: DeliverOrder) -> Order:
        order = self.orders.get(command.order_id)
        order.deliver()
        logger.info("Order delivered", order_id=str(order.id))
        return self._save(order)
