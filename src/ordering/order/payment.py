"""Order payment — command and handler.

Opens a payment intent with the provider for a pending order's total. The
order itself does not change until the payment is confirmed.
"""

import structlog
from protean.fields import Identifier, String

from ordering.domain import ordering
from ordering.exceptions import InvalidTransitionError
from ordering.order.order import OrderStatus
from ordering.order.repository import OrderRepository
from payments.gateway.port import PaymentIntent, PaymentService

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ProcessPayment:
    order_id = Identifier(required=True)
    customer_id = String(max_length=255)


class ProcessPaymentHandler:
    def __init__(self, orders: OrderRepository, payments: PaymentService) -> None:
        self.orders = orders
        self.payments = payments

    def handle(self, command: ProcessPayment) -> PaymentIntent:
        order = self.orders.get(command.order_id)
        if order.status != OrderStatus.PENDING.value:
            raise InvalidTransitionError(
                f"Order must be pending to process payment (current status: {order.status})"
            )

        intent = self.payments.create_payment_intent(
            order.total_amount,
            str(order.id),
            customer_id=command.customer_id,
        )
        logger.info(
            "Payment intent opened",
            order_id=str(order.id),
            payment_intent_id=intent.id,
            amount=str(order.total_amount),
        )
        return intent
