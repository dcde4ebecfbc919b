"""Order confirmation — command and handler.

Confirms a pending order once its payment intent has succeeded, then
credits each artist's sales total with their line subtotals.
"""

import structlog
from protean.fields import Identifier, String

from ordering.domain import ordering
from ordering.exceptions import InvalidTransitionError
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from ordering.outbox import EventOutbox
from ordering.storage.lookups import find_product_chain
from ordering.storage.port import ArtistLedger, CatalogStore
from payments.gateway.port import PaymentService

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255)


class ConfirmOrderHandler:
    def __init__(
        self,
        orders: OrderRepository,
        payments: PaymentService,
        catalog: CatalogStore,
        ledger: ArtistLedger,
        outbox: EventOutbox,
    ) -> None:
        self.orders = orders
        self.payments = payments
        self.catalog = catalog
        self.ledger = ledger
        self.outbox = outbox

    def handle(self, command: ConfirmOrder) -> Order:
        order = self.orders.get(command.order_id)

        intent = self.payments.get_payment_intent(command.payment_intent_id)
        if not intent.succeeded:
            raise InvalidTransitionError(
                f"Payment must be succeeded to confirm the order (payment status: {intent.status})"
            )

        order.confirm(intent.id)
        self.orders.save_status(order)
        self.outbox.collect(order)
        logger.info("Order confirmed", order_id=str(order.id), payment_intent_id=intent.id)

        self._credit_artists(order)
        return order

    def _credit_artists(self, order: Order) -> None:
        """Add each line subtotal to its artist's sales; lines with a broken catalog chain are skipped."""
        for item in order.items:
            chain = find_product_chain(self.catalog, item.product_id)
            if chain is None:
                logger.info(
                    "Skipping artist credit, catalog entry missing",
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                )
                continue

            subtotal = item.total_price.amount
            self.ledger.update_artist(chain.artist.id, round((chain.artist.total_sales or 0) + subtotal, 2))
            logger.info(
                "Artist credited",
                order_id=str(order.id),
                artist_id=chain.artist.id,
                amount=subtotal,
            )
