"""Cart item management — commands and handlers.

Cart lines live in the external CartStore; there is no cart aggregate.
"""

import structlog
from protean.fields import Identifier, Integer

from ordering.domain import ordering
from ordering.exceptions import NotFoundError
from ordering.storage.lookups import find_product_type, resolve_product_chain
from ordering.storage.port import CartLine, CartStore, CatalogStore

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Order")
class UpdateCartItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # zero or less removes the line


@ordering.command(part_of="Order")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ClearCart:
    user_id = Identifier(required=True)


def _find_line(cart: CartStore, user_id, product_id) -> CartLine:
    line = next(
        (line for line in cart.get_cart_items(str(user_id)) if line.product_id == str(product_id)),
        None,
    )
    if line is None:
        raise NotFoundError("cart_item", product_id, "Cart item not found")
    return line


class AddToCartHandler:
    """Adds a sellable product to the cart, or tops up the existing line."""

    def __init__(self, cart: CartStore, catalog: CatalogStore) -> None:
        self.cart = cart
        self.catalog = catalog

    def handle(self, command: AddToCart) -> CartLine:
        chain = resolve_product_chain(self.catalog, command.product_id)
        if find_product_type(self.catalog, chain.product.product_type_id) is None:
            raise NotFoundError("product_type", chain.product.product_type_id)

        line = self.cart.add_cart_item(str(command.user_id), str(command.product_id), command.quantity)
        logger.info(
            "Product added to cart",
            user_id=str(command.user_id),
            product_id=str(command.product_id),
            quantity=line.quantity,
        )
        return line


class UpdateCartItemHandler:
    def __init__(self, cart: CartStore) -> None:
        self.cart = cart

    def handle(self, command: UpdateCartItem) -> CartLine | None:
        line = _find_line(self.cart, command.user_id, command.product_id)
        if command.quantity <= 0:
            self.cart.remove_cart_item(line.id)
            logger.info("Cart line removed", user_id=str(command.user_id), product_id=str(command.product_id))
            return None
        return self.cart.update_cart_item(line.id, command.quantity)


class RemoveFromCartHandler:
    def __init__(self, cart: CartStore) -> None:
        self.cart = cart

    def handle(self, command: RemoveFromCart) -> None:
        line = _find_line(self.cart, command.user_id, command.product_id)
        self.cart.remove_cart_item(line.id)
        logger.info("Cart line removed", user_id=str(command.user_id), product_id=str(command.product_id))


class ClearCartHandler:
    def __init__(self, cart: CartStore) -> None:
        self.cart = cart

    def handle(self, command: ClearCart) -> None:
        self.cart.clear_cart(str(command.user_id))
