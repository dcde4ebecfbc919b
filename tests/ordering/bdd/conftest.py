"""Shared BDD fixtures and step definitions for the Ordering domain.

Scenarios drive the command handlers through ``services`` (see the ordering
conftest) and record the outcome in ``outcome``: the current order, the
payment intent, the last error raised, and the events handed to the outbox.
"""

import json

import pytest
from ordering.cart.items import AddToCart
from ordering.exceptions import InvalidTransitionError, NotFoundError
from ordering.order.cancellation import CancelOrder, RefundOrder
from ordering.order.confirmation import ConfirmOrder
from ordering.order.creation import CreateOrder
from ordering.order.fulfillment import DeliverOrder, ShipOrder, StartProcessing
from ordering.order.payment import ProcessPayment
from ordering.order.queries import GetOrder
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_ERROR_CLASSES = {
    "validation error": ValidationError,
    "invalid transition error": InvalidTransitionError,
    "not found error": NotFoundError,
}

# Steps that take a pending order to each status
_PATHS = {
    "pending": [],
    "confirmed": ["confirm"],
    "processing": ["confirm", "process"],
    "shipped": ["confirm", "process", "ship"],
    "delivered": ["confirm", "process", "ship", "deliver"],
    "refunded": ["confirm", "process", "ship", "deliver", "refund"],
    "cancelled": ["cancel"],
}


@pytest.fixture()
def outcome():
    return {"order": None, "intent": None, "error": None, "events": []}


@pytest.fixture()
def attempt(outcome):
    """Run a handler call and record any domain error instead of raising it."""

    def run(action, *args, **kwargs):
        try:
            return action(*args, **kwargs)
        except (ValidationError, NotFoundError) as exc:
            outcome["error"] = exc
            return None

    return run


def reload(services, outcome):
    outcome["order"] = services.get_order.handle(GetOrder(order_id=str(outcome["order"].id)))
    return outcome["order"]


def pay_and_confirm(services, outcome):
    order_id = str(outcome["order"].id)
    outcome["intent"] = services.process_payment.handle(ProcessPayment(order_id=order_id))
    outcome["order"] = services.confirm_order.handle(
        ConfirmOrder(order_id=order_id, payment_intent_id=outcome["intent"].id)
    )


def _advance(services, outcome, step):
    order_id = str(outcome["order"].id)
    if step == "confirm":
        pay_and_confirm(services, outcome)
    elif step == "process":
        services.start_processing.handle(StartProcessing(order_id=order_id))
    elif step == "ship":
        services.ship_order.handle(ShipOrder(order_id=order_id, tracking_number="1Z999"))
    elif step == "deliver":
        services.deliver_order.handle(DeliverOrder(order_id=order_id))
    elif step == "refund":
        services.refund_order.handle(RefundOrder(order_id=order_id))
    elif step == "cancel":
        services.cancel_order.handle(CancelOrder(order_id=order_id))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the cart holds {quantity:d} of "{product_id}"'))
def _(services, quantity, product_id):
    services.add_to_cart.handle(AddToCart(user_id="user-1", product_id=product_id, quantity=quantity))


@given("a pending order", target_fixture="outcome")
def _(services, outcome, shipping_address_data):
    services.add_to_cart.handle(AddToCart(user_id="user-1", product_id="prod-a", quantity=2))
    services.add_to_cart.handle(AddToCart(user_id="user-1", product_id="prod-b", quantity=1))
    outcome["order"] = services.create_order.handle(
        CreateOrder(user_id="user-1", shipping_address=json.dumps(shipping_address_data))
    )
    services.outbox.drain()
    return outcome


@given(parsers.cfparse("the order is {state}"))
def _(services, outcome, state):
    for step in _PATHS[state]:
        _advance(services, outcome, step)
    reload(services, outcome)
    services.outbox.drain()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(services, outcome, status):
    assert reload(services, outcome).status == status


@then(parsers.cfparse("the action fails with a {error_type}"))
def _(outcome, error_type):
    assert outcome["error"] is not None, "Expected an error but none was raised"
    assert isinstance(outcome["error"], _ERROR_CLASSES[error_type])


@then(parsers.cfparse("the action fails with an {error_type}"))
def _(outcome, error_type):
    assert outcome["error"] is not None, "Expected an error but none was raised"
    assert isinstance(outcome["error"], _ERROR_CLASSES[error_type])


@then(parsers.cfparse("an {event_type} event is sent to the outbox"))
def _(services, outcome, event_type):
    outcome["events"].extend(services.outbox.drain())
    names = [event.__class__.__name__ for event in outcome["events"]]
    assert event_type in names, f"No {event_type} event found. Events: {names}"


@then("no event is sent to the outbox")
def _(services):
    assert services.outbox.drain() == []
