"""Order aggregate — an immutable purchase record and its status state machine.

Line items and the shipping address are fixed at creation time; only the
status, the payment intent id and the tracking number evolve afterwards.

State Machine (7 states):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED → REFUNDED
    PENDING/CONFIRMED/PROCESSING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import logger, ordering
from ordering.exceptions import InvalidTransitionError
from ordering.order.events import OrderCreated, OrderShipped, OrderStatusChanged
from ordering.shared.money import DEFAULT_CURRENCY, Money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# States from which cancellation is allowed
_CANCELLABLE_STATES = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
)

# States from which a refund is allowed
_REFUNDABLE_STATES = (OrderStatus.DELIVERED,)


def _describe(states) -> str:
    names = [state.value for state in states]
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} or {names[-1]}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
_ADDRESS_FIELDS = (
    ("full_name", "Full name"),
    ("address_line1", "Address line 1"),
    ("address_line2", None),
    ("city", "City"),
    ("state", "State"),
    ("postal_code", "Postal code"),
    ("country", "Country"),
)

_CAMEL_CASE_KEYS = {
    "fullName": "full_name",
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "postalCode": "postal_code",
}


@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where an order is delivered, captured at checkout time.

    Every line except ``address_line2`` is required and may not be blank.
    """

    full_name = String(required=True, max_length=100)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)

    @invariant.post
    def required_lines_must_not_be_blank(self):
        for field_name, label in _ADDRESS_FIELDS:
            if label is None:
                continue
            value = getattr(self, field_name)
            if value is None or not str(value).strip():
                raise ValidationError({field_name: [f"{label} is required"]})

    @classmethod
    def from_dict(cls, data: dict) -> "ShippingAddress":
        """Build an address from a payload using snake_case or camelCase keys."""
        values = {_CAMEL_CASE_KEYS.get(key, key): value for key, value in (data or {}).items()}
        return cls(**{field_name: values.get(field_name) for field_name, _ in _ADDRESS_FIELDS})

    def to_postal_string(self) -> str:
        lines = [
            self.full_name,
            self.address_line1,
            self.address_line2,
            f"{self.city}, {self.state} {self.postal_code}",
            self.country,
        ]
        return "\n".join(line for line in lines if line and line.strip())

    def __str__(self) -> str:
        return self.to_postal_string()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A purchased product with its quantity and the unit price locked at checkout."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    product_name = String(max_length=255)
    artwork_title = String(max_length=255)
    artist_name = String(max_length=255)

    @property
    def total_price(self) -> Money:
        return self.unit_price.multiply(self.quantity)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_intent_id = String(max_length=255)
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, items, shipping_address):
        """Create a new pending order and record an OrderCreated event.

        Args:
            user_id: The user placing the order.
            items: Non-empty list of OrderItem entities, all in one currency.
            shipping_address: A ShippingAddress value object.
        """
        if not items:
            raise ValidationError({"items": ["Order must have at least one item"]})
        if shipping_address is None:
            raise ValidationError({"shipping_address": ["Shipping address is required"]})

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(item)

        total = order.total_amount
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=str(user_id),
                total_amount=total.amount,
                currency=total.currency,
                item_count=len(order.items),
                created_at=now,
            )
        )
        return order

    @classmethod
    def from_persistence(
        cls,
        order_id,
        user_id,
        items,
        status,
        shipping_address=None,
        payment_intent_id=None,
        tracking_number=None,
        created_at=None,
        updated_at=None,
    ):
        """Rebuild an order from stored data without emitting events.

        A status string that is not a known OrderStatus falls back to pending.
        """
        known_statuses = {member.value for member in OrderStatus}
        if status not in known_statuses:
            logger.warning("Unknown stored order status, defaulting to pending", order_id=str(order_id), status=status)
            status = OrderStatus.PENDING.value

        order = cls(
            id=order_id,
            user_id=user_id,
            status=status,
            shipping_address=shipping_address,
            payment_intent_id=payment_intent_id,
            tracking_number=tracking_number,
            created_at=created_at,
            updated_at=updated_at or created_at,
        )
        for item in items:
            order.add_items(item)
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def total_amount(self) -> Money:
        """Sum of line totals; zero in the default currency when there are no items."""
        if not self.items:
            return Money.zero(DEFAULT_CURRENCY)

        total = Money.zero(self.items[0].unit_price.currency)
        for item in self.items:
            total = total.add(item.total_price)
        return total

    def can_be_cancelled(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    def can_be_refunded(self) -> bool:
        return OrderStatus(self.status) in _REFUNDABLE_STATES

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_status(self, allowed, action):
        current = OrderStatus(self.status)
        if current not in allowed:
            raise InvalidTransitionError(
                f"Order must be {_describe(allowed)} to {action} (current status: {current.value})"
            )

    def _change_status(self, target_status):
        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target_status.value,
                payment_intent_id=self.payment_intent_id,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def confirm(self, payment_intent_id):
        self._assert_status((OrderStatus.PENDING,), "confirm")
        self.payment_intent_id = payment_intent_id
        self._change_status(OrderStatus.CONFIRMED)

    def start_processing(self):
        self._assert_status((OrderStatus.CONFIRMED,), "start processing")
        self._change_status(OrderStatus.PROCESSING)

    def ship(self, tracking_number):
        self._assert_status((OrderStatus.PROCESSING,), "ship")
        if not tracking_number or not tracking_number.strip():
            raise ValidationError({"tracking_number": ["Tracking number is required"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.tracking_number = tracking_number.strip()
        self.updated_at = now

        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                tracking_number=self.tracking_number,
                shipped_at=now,
            )
        )

    def deliver(self):
        self._assert_status((OrderStatus.SHIPPED,), "deliver")
        self._change_status(OrderStatus.DELIVERED)

    def cancel(self):
        self._assert_status(_CANCELLABLE_STATES, "cancel")
        self._change_status(OrderStatus.CANCELLED)

    def refund(self):
        self._assert_status(_REFUNDABLE_STATES, "refund")
        self._change_status(OrderStatus.REFUNDED)

    def update_shipping_address(self, address):
        self._assert_status((OrderStatus.PENDING,), "update the shipping address")
        if address is None:
            raise ValidationError({"shipping_address": ["Shipping address is required"]})
        self.shipping_address = address
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Event collection
    # -------------------------------------------------------------------
    def drain_events(self) -> list:
        """Return the events recorded since the last drain and forget them."""
        events = list(self._events)
        self._events.clear()
        return events
