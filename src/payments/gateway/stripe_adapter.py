"""Stripe payment service adapter.

Talks to Stripe through the stripe-python SDK. Amounts go out in minor units
(cents) with a lowercase currency and come back in major units with an
uppercase currency. Every SDK failure is re-raised as a PaymentError whose
message starts with the operation that failed.
"""

from typing import TYPE_CHECKING

import stripe
import structlog

from ordering.exceptions import PaymentError
from payments.gateway.port import (
    DEFAULT_REFUND_REASON,
    PaymentIntent,
    PaymentService,
    RefundResult,
)

if TYPE_CHECKING:
    from ordering.shared.money import Money

logger = structlog.get_logger(__name__)


def _from_minor_units(value) -> float:
    return (value or 0) / 100


def _to_payment_intent(intent) -> PaymentIntent:
    return PaymentIntent(
        id=intent.id,
        amount=_from_minor_units(intent.amount),
        currency=(intent.currency or "").upper(),
        status=intent.status,
        client_secret=intent.client_secret,
    )


class StripePaymentService(PaymentService):
    """Production payment provider backed by the Stripe API."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def _fail(self, prefix: str, error: stripe.StripeError, **context) -> PaymentError:
        logger.error(prefix, error=str(error), **context)
        return PaymentError(f"{prefix}: {error}")

    def create_payment_intent(
        self,
        amount: "Money",
        order_id: str,
        customer_id: str | None = None,
    ) -> PaymentIntent:
        params = {
            "amount": amount.to_minor_units(),
            "currency": amount.currency.lower(),
            "metadata": {"orderId": str(order_id)},
            "automatic_payment_methods": {"enabled": True},
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            intent = stripe.PaymentIntent.create(api_key=self.api_key, **params)
        except stripe.StripeError as exc:
            raise self._fail("Payment intent creation failed", exc, order_id=str(order_id)) from exc

        logger.info("Payment intent created", order_id=str(order_id), payment_intent_id=intent.id)
        return _to_payment_intent(intent)

    def confirm_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.confirm(payment_intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            raise self._fail("Payment confirmation failed", exc, payment_intent_id=payment_intent_id) from exc
        return _to_payment_intent(intent)

    def capture_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.capture(payment_intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            raise self._fail("Payment capture failed", exc, payment_intent_id=payment_intent_id) from exc
        return _to_payment_intent(intent)

    def refund_payment(
        self,
        payment_intent_id: str,
        amount: "Money | None" = None,
        reason: str | None = None,
    ) -> RefundResult:
        params = {
            "payment_intent": payment_intent_id,
            "reason": reason or DEFAULT_REFUND_REASON,
        }
        if amount is not None:
            params["amount"] = amount.to_minor_units()

        try:
            refund = stripe.Refund.create(api_key=self.api_key, **params)
        except stripe.StripeError as exc:
            raise self._fail("Refund failed", exc, payment_intent_id=payment_intent_id) from exc

        logger.info("Refund created", payment_intent_id=payment_intent_id, refund_id=refund.id)
        return RefundResult(
            id=refund.id,
            amount=_from_minor_units(refund.amount),
            status=refund.status,
            reason=refund.reason,
        )

    def get_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            raise self._fail(
                "Failed to retrieve payment intent", exc, payment_intent_id=payment_intent_id
            ) from exc
        return _to_payment_intent(intent)

    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None:
        try:
            stripe.PaymentMethod.attach(payment_method_id, customer=customer_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            raise self._fail(
                "Failed to attach payment method", exc, payment_method_id=payment_method_id
            ) from exc
