"""Order cancellation and refund — commands and handlers.

Cancelling never refunds; a paid order that is cancelled has to be refunded
through the provider separately.
"""

import structlog
from protean.fields import Float, Identifier, String

from ordering.domain import ordering
from ordering.exceptions import InvalidTransitionError, PaymentError
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from ordering.outbox import EventOutbox
from ordering.shared.money import Money
from payments.gateway.port import PaymentService, RefundResult

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@ordering.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)
    amount = Float(min_value=0.0)  # Optional, defaults to a full refund
    reason = String(max_length=500)


class CancelOrderHandler:
    def __init__(self, orders: OrderRepository, outbox: EventOutbox) -> None:
        self.orders = orders
        self.outbox = outbox

    def handle(self, command: CancelOrder) -> Order:
        order = self.orders.get(command.order_id)
        order.cancel()
        self.orders.save_status(order)
        self.outbox.collect(order)

        logger.info("Order cancelled", order_id=str(order.id), reason=command.reason)
        return order


class RefundOrderHandler:
    def __init__(self, orders: OrderRepository, payments: PaymentService, outbox: EventOutbox) -> None:
        self.orders = orders
        self.payments = payments
        self.outbox = outbox

    def handle(self, command: RefundOrder) -> RefundResult:
        order = self.orders.get(command.order_id)
        if not order.can_be_refunded():
            raise InvalidTransitionError(f"Order must be delivered to refund (current status: {order.status})")
        if not order.payment_intent_id:
            raise PaymentError(f"Order {order.id} has no recorded payment to refund")

        amount = None
        if command.amount is not None:
            amount = Money.create(command.amount, order.total_amount.currency)

        result = self.payments.refund_payment(order.payment_intent_id, amount=amount, reason=command.reason)

        order.refund()
        self.orders.save_status(order)
        self.outbox.collect(order)

        logger.info(
            "Order refunded",
            order_id=str(order.id),
            refund_id=result.id,
            amount=result.amount,
        )
        return result
