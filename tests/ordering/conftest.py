import json

import pytest
from ordering.cart.items import AddToCart
from ordering.order.creation import CreateOrder
from ordering.outbox import InMemoryOutbox
from ordering.services import build_services
from ordering.storage.memory_adapter import InMemoryCartStore, InMemoryCatalog, InMemoryOrderStore
from ordering.storage.port import ArtistRecord, ArtworkRecord, ProductRecord, ProductTypeRecord
from payments.gateway.simulated_adapter import SimulatedPaymentService


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalog():
    """Two artists, each with one artwork sold as one product.

    prod-a: "Harbor at Dusk" canvas by Mira Okafor, 10.00 USD
    prod-b: "Quiet Field" poster by Jon Reyes, 25.00 USD
    """
    catalog = InMemoryCatalog()
    catalog.add_artist(ArtistRecord(id="artist-1", display_name="Mira Okafor", total_sales=0.0))
    catalog.add_artist(ArtistRecord(id="artist-2", display_name="Jon Reyes", total_sales=100.0))
    catalog.add_artwork(ArtworkRecord(id="art-1", artist_id="artist-1", title="Harbor at Dusk"))
    catalog.add_artwork(ArtworkRecord(id="art-2", artist_id="artist-2", title="Quiet Field"))
    catalog.add_product_type(ProductTypeRecord(id="type-canvas", name="Canvas"))
    catalog.add_product_type(ProductTypeRecord(id="type-poster", name="Poster"))
    catalog.add_product(ProductRecord(id="prod-a", artwork_id="art-1", product_type_id="type-canvas", price=10.0))
    catalog.add_product(ProductRecord(id="prod-b", artwork_id="art-2", product_type_id="type-poster", price=25.0))
    return catalog


@pytest.fixture()
def cart_store():
    return InMemoryCartStore()


@pytest.fixture()
def order_store():
    return InMemoryOrderStore()


@pytest.fixture()
def payments():
    return SimulatedPaymentService()


@pytest.fixture()
def outbox():
    return InMemoryOutbox()


@pytest.fixture()
def services(cart_store, catalog, order_store, payments, outbox):
    return build_services(
        cart_store=cart_store,
        catalog=catalog,
        order_store=order_store,
        payments=payments,
        outbox=outbox,
    )


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------
@pytest.fixture()
def shipping_address_data():
    return {
        "full_name": "Ada Lovelace",
        "address_line1": "12 Gallery Road",
        "address_line2": "Studio 4",
        "city": "Portland",
        "state": "OR",
        "postal_code": "97201",
        "country": "US",
    }


@pytest.fixture()
def pending_order(services, shipping_address_data):
    """An order for user-1 with prod-a ×2 and prod-b ×1 (45.00 USD)."""
    services.add_to_cart.handle(AddToCart(user_id="user-1", product_id="prod-a", quantity=2))
    services.add_to_cart.handle(AddToCart(user_id="user-1", product_id="prod-b", quantity=1))
    order = services.create_order.handle(
        CreateOrder(user_id="user-1", shipping_address=json.dumps(shipping_address_data))
    )
    services.outbox.drain()
    return order
