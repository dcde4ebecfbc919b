"""Application tests for creating an order from the cart."""

import json

import pytest
from ordering.cart.items import AddToCart
from ordering.exceptions import NotFoundError
from ordering.order.creation import CreateOrder
from ordering.order.events import OrderCreated
from ordering.order.order import OrderStatus
from ordering.order.queries import GetOrder
from ordering.services import build_services
from ordering.shared.money import Money
from ordering.storage.memory_adapter import InMemoryOrderStore
from ordering.storage.port import ProductRecord
from protean.exceptions import ValidationError


def _fill_cart(services, user_id="user-1"):
    services.add_to_cart.handle(AddToCart(user_id=user_id, product_id="prod-a", quantity=2))
    services.add_to_cart.handle(AddToCart(user_id=user_id, product_id="prod-b", quantity=1))


def _create(services, address, user_id="user-1"):
    return services.create_order.handle(CreateOrder(user_id=user_id, shipping_address=json.dumps(address)))


class TestCreateOrderFlow:
    def test_creates_pending_order_with_cart_total(self, services, shipping_address_data):
        _fill_cart(services)

        order = _create(services, shipping_address_data)

        assert order.status == OrderStatus.PENDING.value
        assert order.total_amount == Money.create(45.0)
        assert len(order.items) == 2

    def test_cart_is_emptied(self, services, cart_store, shipping_address_data):
        _fill_cart(services)
        _create(services, shipping_address_data)
        assert cart_store.get_cart_items("user-1") == []

    def test_items_snapshot_catalog_details(self, services, shipping_address_data):
        _fill_cart(services)

        order = _create(services, shipping_address_data)

        item = next(item for item in order.items if item.product_id == "prod-a")
        assert item.quantity == 2
        assert item.unit_price == Money.create(10.0)
        assert item.product_name == "Harbor at Dusk - Canvas"
        assert item.artwork_title == "Harbor at Dusk"
        assert item.artist_name == "Mira Okafor"

    def test_header_and_items_persisted(self, services, order_store, shipping_address_data):
        _fill_cart(services)

        order = _create(services, shipping_address_data)

        header = order_store.get_order(str(order.id))
        assert header.user_id == "user-1"
        assert header.total_amount == 45.0
        assert header.status == "pending"
        assert header.shipping_address["postal_code"] == "97201"
        records = order_store.get_order_items(str(order.id))
        assert sorted((record.product_id, record.quantity, record.price) for record in records) == [
            ("prod-a", 2, 10.0),
            ("prod-b", 1, 25.0),
        ]

    def test_order_created_event_sent_to_outbox(self, services, outbox, shipping_address_data):
        _fill_cart(services)

        order = _create(services, shipping_address_data)

        events = outbox.drain()
        assert len(events) == 1
        assert isinstance(events[0], OrderCreated)
        assert events[0].order_id == str(order.id)
        assert order._events == []

    def test_accepts_camel_case_address(self, services):
        _fill_cart(services)
        order = _create(
            services,
            {
                "fullName": "Ada Lovelace",
                "addressLine1": "12 Gallery Road",
                "city": "Portland",
                "state": "OR",
                "postalCode": "97201",
                "country": "US",
            },
        )
        assert order.shipping_address.full_name == "Ada Lovelace"

    def test_price_changes_after_creation_do_not_affect_order(self, services, catalog, shipping_address_data):
        _fill_cart(services)
        order = _create(services, shipping_address_data)

        catalog.add_product(ProductRecord(id="prod-a", artwork_id="art-1", product_type_id="type-canvas", price=99.0))

        assert services.get_order.handle(GetOrder(order_id=str(order.id))).total_amount == Money.create(45.0)

    def test_unknown_product_type_falls_back_to_print(self, services, catalog, shipping_address_data):
        catalog.add_product(ProductRecord(id="prod-c", artwork_id="art-1", product_type_id="type-canvas", price=9.0))
        services.add_to_cart.handle(AddToCart(user_id="user-1", product_id="prod-c", quantity=1))
        catalog.product_types.clear()

        order = _create(services, shipping_address_data)

        assert order.items[0].product_name == "Harbor at Dusk - Print"


class TestCreateOrderFailures:
    def test_empty_cart(self, services, shipping_address_data):
        with pytest.raises(ValidationError) as exc_info:
            _create(services, shipping_address_data)
        assert exc_info.value.messages["cart"] == ["Cart is empty"]

    def test_missing_artist_aborts(self, services, catalog, cart_store, order_store, shipping_address_data):
        _fill_cart(services)
        catalog.remove_artist("artist-2")

        with pytest.raises(NotFoundError):
            _create(services, shipping_address_data)

        assert order_store.get_orders_by_user("user-1") == []
        assert len(cart_store.get_cart_items("user-1")) == 2

    def test_blank_address_field_rejected(self, services, cart_store, shipping_address_data):
        _fill_cart(services)
        shipping_address_data["city"] = "  "

        with pytest.raises(ValidationError) as exc_info:
            _create(services, shipping_address_data)

        assert "city" in exc_info.value.messages
        assert len(cart_store.get_cart_items("user-1")) == 2

    def test_item_write_failure_leaves_header_and_cart(
        self, cart_store, catalog, payments, outbox, shipping_address_data
    ):
        class _FailingItemStore(InMemoryOrderStore):
            def add_order_item(self, item):
                raise RuntimeError("storage unavailable")

        order_store = _FailingItemStore()
        services = build_services(
            cart_store=cart_store,
            catalog=catalog,
            order_store=order_store,
            payments=payments,
            outbox=outbox,
        )
        _fill_cart(services)

        with pytest.raises(RuntimeError, match="storage unavailable"):
            _create(services, shipping_address_data)

        # Header and items are written separately, so the header stays behind
        assert len(order_store.headers) == 1
        (order_id,) = order_store.headers
        assert order_store.get_order(order_id).status == "pending"
        assert order_store.get_order_items(order_id) == []
        assert len(cart_store.get_cart_items("user-1")) == 2
        assert outbox.pending == []
