"""Domain events for the Order aggregate.

Events are immutable facts collected on the aggregate as transitions happen.
The aggregate never dispatches them: handlers hand them to the event outbox
after the triggering write has been persisted.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was created from a user's cart."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(max_length=3, default="USD")
    item_count = Integer()
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new status (confirm, process, deliver, cancel, refund)."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(max_length=50)
    new_status = String(required=True, max_length=50)
    payment_intent_id = String(max_length=255)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order left the warehouse with a carrier tracking number."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    shipped_at = DateTime(required=True)
