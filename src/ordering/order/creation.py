"""Order creation — command and handler.

Turns the user's cart into a pending order. Unit prices are snapshotted
from the catalog at this point and never re-read afterwards.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text

from ordering.domain import ordering
from ordering.order.order import Order, OrderItem, ShippingAddress
from ordering.order.repository import OrderRepository
from ordering.outbox import EventOutbox
from ordering.shared.money import Money
from ordering.storage.lookups import find_product_type, resolve_product_chain
from ordering.storage.port import CartStore, CatalogStore

logger = structlog.get_logger(__name__)

DEFAULT_PRODUCT_TYPE_NAME = "Print"


@ordering.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict


class CreateOrderHandler:
    def __init__(
        self,
        cart: CartStore,
        catalog: CatalogStore,
        orders: OrderRepository,
        outbox: EventOutbox,
    ) -> None:
        self.cart = cart
        self.catalog = catalog
        self.orders = orders
        self.outbox = outbox

    def _snapshot_item(self, line) -> OrderItem:
        chain = resolve_product_chain(self.catalog, line.product_id)
        product_type = find_product_type(self.catalog, chain.product.product_type_id)
        type_name = product_type.name if product_type else DEFAULT_PRODUCT_TYPE_NAME

        return OrderItem(
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=Money.create(chain.product.price, chain.product.currency),
            product_name=f"{chain.artwork.title} - {type_name}",
            artwork_title=chain.artwork.title,
            artist_name=chain.artist.display_name,
        )

    def handle(self, command: CreateOrder) -> Order:
        user_id = str(command.user_id)
        lines = self.cart.get_cart_items(user_id)
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        items = [self._snapshot_item(line) for line in lines]

        address_data = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        order = Order.create(
            user_id=user_id,
            items=items,
            shipping_address=ShippingAddress.from_dict(address_data),
        )

        self.orders.add(order)
        self.cart.clear_cart(user_id)
        self.outbox.collect(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            user_id=user_id,
            total=str(order.total_amount),
            item_count=len(order.items),
        )
        return order
