"""Simulated payment service for development and testing.

Makes no external calls. Every operation succeeds, ids are deterministic
(``pi_sim_<order_id>_<n>`` and ``re_sim_<intent_id>_<n>``, where ``n`` counts
per instance), and created intents are remembered so later reads report the
amount and currency they were created with. Every call is recorded in
``calls`` for inspection.
"""

from itertools import count
from typing import TYPE_CHECKING

from payments.gateway.port import (
    DEFAULT_REFUND_REASON,
    SUCCEEDED,
    PaymentIntent,
    PaymentService,
    RefundResult,
)

if TYPE_CHECKING:
    from ordering.shared.money import Money


class SimulatedPaymentService(PaymentService):
    """Deterministic in-process payment provider."""

    def __init__(self) -> None:
        self.intents: dict[str, PaymentIntent] = {}
        self.attached_methods: dict[str, str] = {}
        self.calls: list[dict] = []
        self._sequence = count(1)

    def _intent(self, payment_intent_id: str) -> PaymentIntent:
        known = self.intents.get(payment_intent_id)
        if known is not None:
            return known
        return PaymentIntent(
            id=payment_intent_id,
            amount=0.0,
            currency="USD",
            status=SUCCEEDED,
            client_secret=f"{payment_intent_id}_secret_sim",
        )

    def create_payment_intent(
        self,
        amount: "Money",
        order_id: str,
        customer_id: str | None = None,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount.amount,
                "currency": amount.currency,
                "order_id": order_id,
                "customer_id": customer_id,
            }
        )

        intent_id = f"pi_sim_{order_id}_{next(self._sequence)}"
        intent = PaymentIntent(
            id=intent_id,
            amount=amount.amount,
            currency=amount.currency,
            status=SUCCEEDED,
            client_secret=f"{intent_id}_secret_sim",
        )
        self.intents[intent_id] = intent
        return intent

    def confirm_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "confirm_payment_intent", "payment_intent_id": payment_intent_id})
        return self._intent(payment_intent_id)

    def capture_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "capture_payment_intent", "payment_intent_id": payment_intent_id})
        return self._intent(payment_intent_id)

    def refund_payment(
        self,
        payment_intent_id: str,
        amount: "Money | None" = None,
        reason: str | None = None,
    ) -> RefundResult:
        self.calls.append(
            {
                "method": "refund_payment",
                "payment_intent_id": payment_intent_id,
                "amount": amount.amount if amount is not None else None,
                "reason": reason,
            }
        )

        refunded = amount.amount if amount is not None else self._intent(payment_intent_id).amount
        return RefundResult(
            id=f"re_sim_{payment_intent_id}_{next(self._sequence)}",
            amount=refunded,
            status=SUCCEEDED,
            reason=reason or DEFAULT_REFUND_REASON,
        )

    def get_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "get_payment_intent", "payment_intent_id": payment_intent_id})
        return self._intent(payment_intent_id)

    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None:
        self.calls.append(
            {
                "method": "attach_payment_method",
                "payment_method_id": payment_method_id,
                "customer_id": customer_id,
            }
        )
        self.attached_methods[payment_method_id] = customer_id
