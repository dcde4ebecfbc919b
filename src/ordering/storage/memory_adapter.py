"""In-memory storage adapters for development and testing.

These keep everything in dictionaries on the instance, so each composition
root (or test) gets an isolated store. Records are frozen, so updates
replace the stored record.
"""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

import structlog

from ordering.storage.port import (
    ArtistLedger,
    ArtistRecord,
    ArtworkRecord,
    CartLine,
    CartStore,
    CatalogStore,
    OrderHeader,
    OrderItemRecord,
    OrderStore,
    ProductRecord,
    ProductTypeRecord,
)

logger = structlog.get_logger(__name__)


class InMemoryCartStore(CartStore):
    def __init__(self) -> None:
        self.lines: dict[str, CartLine] = {}

    def get_cart_items(self, user_id: str) -> list[CartLine]:
        return [line for line in self.lines.values() if line.user_id == user_id]

    def add_cart_item(self, user_id: str, product_id: str, quantity: int) -> CartLine:
        existing = next(
            (line for line in self.get_cart_items(user_id) if line.product_id == product_id),
            None,
        )
        if existing is not None:
            updated = replace(existing, quantity=existing.quantity + quantity)
            self.lines[updated.id] = updated
            return updated

        line = CartLine(
            id=str(uuid4()),
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            created_at=datetime.now(UTC),
        )
        self.lines[line.id] = line
        return line

    def update_cart_item(self, line_id: str, quantity: int) -> CartLine | None:
        line = self.lines.get(line_id)
        if line is None:
            return None
        updated = replace(line, quantity=quantity)
        self.lines[line_id] = updated
        return updated

    def remove_cart_item(self, line_id: str) -> None:
        self.lines.pop(line_id, None)

    def clear_cart(self, user_id: str) -> None:
        for line in self.get_cart_items(user_id):
            del self.lines[line.id]


class InMemoryCatalog(CatalogStore, ArtistLedger):
    """Catalog reads and artist ledger writes over one set of dictionaries."""

    def __init__(self) -> None:
        self.products: dict[str, ProductRecord] = {}
        self.artworks: dict[str, ArtworkRecord] = {}
        self.artists: dict[str, ArtistRecord] = {}
        self.product_types: dict[str, ProductTypeRecord] = {}

    # Seeding helpers
    def add_product(self, product: ProductRecord) -> ProductRecord:
        self.products[product.id] = product
        return product

    def add_artwork(self, artwork: ArtworkRecord) -> ArtworkRecord:
        self.artworks[artwork.id] = artwork
        return artwork

    def add_artist(self, artist: ArtistRecord) -> ArtistRecord:
        self.artists[artist.id] = artist
        return artist

    def add_product_type(self, product_type: ProductTypeRecord) -> ProductTypeRecord:
        self.product_types[product_type.id] = product_type
        return product_type

    def remove_artist(self, artist_id: str) -> None:
        self.artists.pop(artist_id, None)

    # CatalogStore
    def get_product(self, product_id: str) -> ProductRecord | None:
        return self.products.get(product_id)

    def get_artwork(self, artwork_id: str) -> ArtworkRecord | None:
        return self.artworks.get(artwork_id)

    def get_artist(self, artist_id: str) -> ArtistRecord | None:
        return self.artists.get(artist_id)

    def get_product_types(self) -> list[ProductTypeRecord]:
        return list(self.product_types.values())

    # ArtistLedger
    def update_artist(self, artist_id: str, total_sales: float) -> ArtistRecord | None:
        artist = self.artists.get(artist_id)
        if artist is None:
            return None
        updated = replace(artist, total_sales=total_sales)
        self.artists[artist_id] = updated
        logger.debug("Artist sales updated", artist_id=artist_id, total_sales=total_sales)
        return updated


class InMemoryOrderStore(OrderStore):
    def __init__(self) -> None:
        self.headers: dict[str, OrderHeader] = {}
        self.items: dict[str, list[OrderItemRecord]] = {}

    def create_order(self, header: OrderHeader) -> OrderHeader:
        self.headers[header.id] = header
        self.items.setdefault(header.id, [])
        return header

    def get_order(self, order_id: str) -> OrderHeader | None:
        return self.headers.get(order_id)

    def update_order_status(
        self,
        order_id: str,
        status: str,
        tracking_number: str | None = None,
        payment_intent_id: str | None = None,
    ) -> OrderHeader | None:
        header = self.headers.get(order_id)
        if header is None:
            return None

        changes = {"status": status}
        if tracking_number is not None:
            changes["tracking_number"] = tracking_number
        if payment_intent_id is not None:
            changes["payment_intent_id"] = payment_intent_id

        updated = replace(header, **changes)
        self.headers[order_id] = updated
        return updated

    def add_order_item(self, item: OrderItemRecord) -> OrderItemRecord:
        self.items.setdefault(item.order_id, []).append(item)
        return item

    def get_order_items(self, order_id: str) -> list[OrderItemRecord]:
        return list(self.items.get(order_id, []))

    def get_orders_by_user(self, user_id: str) -> list[OrderHeader]:
        orders = [header for header in self.headers.values() if header.user_id == user_id]
        return sorted(orders, key=lambda header: header.created_at or datetime.min.replace(tzinfo=UTC), reverse=True)
