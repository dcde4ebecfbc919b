"""Maps Order aggregates to and from the OrderStore port.

The store keeps a header row plus one row per line item. Writing a new
order is a header write followed by one write per item, with no
transaction around them.
"""

import structlog

from ordering.exceptions import NotFoundError
from ordering.order.order import Order, OrderItem, ShippingAddress
from ordering.shared.money import Money
from ordering.storage.port import OrderHeader, OrderItemRecord, OrderStore

logger = structlog.get_logger(__name__)


def _to_item(record: OrderItemRecord) -> OrderItem:
    return OrderItem(
        id=record.id,
        product_id=record.product_id,
        quantity=record.quantity,
        unit_price=Money.create(record.price, record.currency),
        product_name=record.product_name,
        artwork_title=record.artwork_title,
        artist_name=record.artist_name,
    )


def _to_order(header: OrderHeader, records: list[OrderItemRecord]) -> Order:
    address = ShippingAddress.from_dict(header.shipping_address) if header.shipping_address else None
    return Order.from_persistence(
        order_id=header.id,
        user_id=header.user_id,
        items=[_to_item(record) for record in records],
        status=header.status,
        shipping_address=address,
        payment_intent_id=header.payment_intent_id,
        tracking_number=header.tracking_number,
        created_at=header.created_at,
    )


class OrderRepository:
    def __init__(self, store: OrderStore) -> None:
        self.store = store

    def get(self, order_id) -> Order:
        header = self.store.get_order(str(order_id))
        if header is None:
            raise NotFoundError("order", order_id)
        return _to_order(header, self.store.get_order_items(header.id))

    def list_for_user(self, user_id) -> list[Order]:
        return [
            _to_order(header, self.store.get_order_items(header.id))
            for header in self.store.get_orders_by_user(str(user_id))
        ]

    def add(self, order: Order) -> None:
        """Persist a new order: the header first, then each line item."""
        total = order.total_amount
        order_id = str(order.id)
        self.store.create_order(
            OrderHeader(
                id=order_id,
                user_id=str(order.user_id),
                total_amount=total.amount,
                currency=total.currency,
                status=order.status,
                shipping_address=order.shipping_address.to_dict() if order.shipping_address else None,
                tracking_number=order.tracking_number,
                payment_intent_id=order.payment_intent_id,
                created_at=order.created_at,
            )
        )
        for item in order.items:
            self.store.add_order_item(
                OrderItemRecord(
                    id=str(item.id),
                    order_id=order_id,
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price=item.unit_price.amount,
                    currency=item.unit_price.currency,
                    product_name=item.product_name,
                    artwork_title=item.artwork_title,
                    artist_name=item.artist_name,
                )
            )
        logger.debug("Order persisted", order_id=order_id, item_count=len(order.items))

    def save_status(self, order: Order) -> None:
        """Persist the order's status along with its tracking number and intent id."""
        updated = self.store.update_order_status(
            str(order.id),
            order.status,
            tracking_number=order.tracking_number,
            payment_intent_id=order.payment_intent_id,
        )
        if updated is None:
            raise NotFoundError("order", order.id)
