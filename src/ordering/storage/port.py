"""Storage ports for the ordering context.

Carts, the catalog, orders and the artist sales ledger live outside this
context. Handlers reach them only through these contracts, which exchange
plain frozen records rather than ORM rows. An in-memory adapter for every
port ships in ``ordering.storage.memory_adapter``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CartLine:
    """One product in a user's cart."""

    id: str
    user_id: str
    product_id: str
    quantity: int
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProductRecord:
    """A purchasable print of an artwork at a given price."""

    id: str
    artwork_id: str
    product_type_id: str
    price: float
    currency: str = "USD"


@dataclass(frozen=True)
class ArtworkRecord:
    id: str
    artist_id: str
    title: str


@dataclass(frozen=True)
class ArtistRecord:
    id: str
    display_name: str
    total_sales: float = 0.0


@dataclass(frozen=True)
class ProductTypeRecord:
    """A print format, such as "Canvas" or "Poster"."""

    id: str
    name: str


@dataclass(frozen=True)
class OrderHeader:
    """The stored order row, without its line items."""

    id: str
    user_id: str
    total_amount: float
    currency: str
    status: str
    shipping_address: dict | None = None
    tracking_number: str | None = None
    payment_intent_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class OrderItemRecord:
    """A stored order line with its unit price snapshot."""

    id: str
    order_id: str
    product_id: str
    quantity: int
    price: float
    currency: str = "USD"
    product_name: str | None = None
    artwork_title: str | None = None
    artist_name: str | None = None


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------
class CartStore(ABC):
    """Per-user shopping cart lines."""

    @abstractmethod
    def get_cart_items(self, user_id: str) -> list[CartLine]:
        """Return the user's cart lines, oldest first."""
        ...

    @abstractmethod
    def add_cart_item(self, user_id: str, product_id: str, quantity: int) -> CartLine:
        """Add a product to the cart, increasing the quantity of an existing line."""
        ...

    @abstractmethod
    def update_cart_item(self, line_id: str, quantity: int) -> CartLine | None:
        """Set a line's quantity. Returns None when the line does not exist."""
        ...

    @abstractmethod
    def remove_cart_item(self, line_id: str) -> None: ...

    @abstractmethod
    def clear_cart(self, user_id: str) -> None: ...


class CatalogStore(ABC):
    """Read access to products, artworks, artists and product types."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductRecord | None: ...

    @abstractmethod
    def get_artwork(self, artwork_id: str) -> ArtworkRecord | None: ...

    @abstractmethod
    def get_artist(self, artist_id: str) -> ArtistRecord | None: ...

    @abstractmethod
    def get_product_types(self) -> list[ProductTypeRecord]: ...


class OrderStore(ABC):
    """Order headers and their line items."""

    @abstractmethod
    def create_order(self, header: OrderHeader) -> OrderHeader: ...

    @abstractmethod
    def get_order(self, order_id: str) -> OrderHeader | None: ...

    @abstractmethod
    def update_order_status(
        self,
        order_id: str,
        status: str,
        tracking_number: str | None = None,
        payment_intent_id: str | None = None,
    ) -> OrderHeader | None:
        """Update the status, and the tracking number or intent id when given."""
        ...

    @abstractmethod
    def add_order_item(self, item: OrderItemRecord) -> OrderItemRecord: ...

    @abstractmethod
    def get_order_items(self, order_id: str) -> list[OrderItemRecord]: ...

    @abstractmethod
    def get_orders_by_user(self, user_id: str) -> list[OrderHeader]:
        """Return the user's orders, newest first."""
        ...


class ArtistLedger(ABC):
    """Write access to artist sales totals."""

    @abstractmethod
    def update_artist(self, artist_id: str, total_sales: float) -> ArtistRecord | None: ...
