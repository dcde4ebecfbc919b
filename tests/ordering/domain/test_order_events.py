"""Tests for Order events — construction and the events each transition records."""

from datetime import UTC, datetime

import pytest
from ordering.exceptions import InvalidTransitionError
from ordering.order.events import OrderCreated, OrderShipped, OrderStatusChanged
from ordering.order.order import Order, OrderItem, OrderStatus, ShippingAddress
from ordering.shared.money import Money


def _make_order():
    return Order.create(
        user_id="user-1",
        items=[OrderItem(product_id="prod-a", quantity=3, unit_price=Money.create(12.5))],
        shipping_address=ShippingAddress(
            full_name="Ada Lovelace",
            address_line1="12 Gallery Road",
            city="Portland",
            state="OR",
            postal_code="97201",
            country="US",
        ),
    )


class TestEventConstruction:
    def test_versions(self):
        assert OrderCreated.__version__ == "v1"
        assert OrderStatusChanged.__version__ == "v1"
        assert OrderShipped.__version__ == "v1"

    def test_order_created(self):
        now = datetime.now(UTC)
        event = OrderCreated(
            order_id="ord-001",
            user_id="user-1",
            total_amount=37.5,
            currency="USD",
            item_count=1,
            created_at=now,
        )
        assert event.order_id == "ord-001"
        assert event.total_amount == 37.5
        assert event.created_at == now

    def test_order_shipped(self):
        event = OrderShipped(order_id="ord-001", tracking_number="1Z999", shipped_at=datetime.now(UTC))
        assert event.tracking_number == "1Z999"


class TestTransitionEvents:
    def test_confirm_records_status_change(self):
        order = _make_order()
        order._events.clear()

        order.confirm("pi_123")

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.order_id == str(order.id)
        assert event.previous_status == OrderStatus.PENDING.value
        assert event.new_status == OrderStatus.CONFIRMED.value
        assert event.payment_intent_id == "pi_123"

    def test_ship_records_order_shipped(self):
        order = _make_order()
        order.confirm("pi_123")
        order.start_processing()
        order._events.clear()

        order.ship("1Z999")

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderShipped)
        assert event.tracking_number == "1Z999"

    def test_each_transition_records_one_event(self):
        order = _make_order()
        order.confirm("pi_123")
        order.start_processing()
        order.ship("1Z999")
        order.deliver()
        order.refund()

        names = [event.__class__.__name__ for event in order.drain_events()]
        assert names == [
            "OrderCreated",
            "OrderStatusChanged",
            "OrderStatusChanged",
            "OrderShipped",
            "OrderStatusChanged",
            "OrderStatusChanged",
        ]

    def test_cancel_records_status_change(self):
        order = _make_order()
        order._events.clear()

        order.cancel()

        assert order._events[0].new_status == OrderStatus.CANCELLED.value

    def test_failed_transition_records_nothing(self):
        order = _make_order()
        order._events.clear()

        with pytest.raises(InvalidTransitionError):
            order.deliver()

        assert order._events == []
