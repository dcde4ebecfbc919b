"""Payment service port (abstract interface).

Defines the contract that every payment provider adapter implements, so
handlers can run against SimulatedPaymentService (dev/test) or
StripePaymentService (production) without any code changes. Amounts cross
this boundary in major units (dollars), never in cents.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ordering.shared.money import Money

SUCCEEDED = "succeeded"
DEFAULT_REFUND_REASON = "requested_by_customer"


@dataclass(frozen=True)
class PaymentIntent:
    """A provider-side payment attempt for one order."""

    id: str
    amount: float
    currency: str
    status: str
    client_secret: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund request."""

    id: str
    amount: float
    status: str
    reason: str | None = None


class PaymentService(ABC):
    """Abstract payment provider interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount: "Money",
        order_id: str,
        customer_id: str | None = None,
    ) -> PaymentIntent:
        """Create a payment intent for an order total."""
        ...

    @abstractmethod
    def confirm_payment_intent(self, payment_intent_id: str) -> PaymentIntent: ...

    @abstractmethod
    def capture_payment_intent(self, payment_intent_id: str) -> PaymentIntent: ...

    @abstractmethod
    def refund_payment(
        self,
        payment_intent_id: str,
        amount: "Money | None" = None,
        reason: str | None = None,
    ) -> RefundResult:
        """Refund a payment, in full when no amount is given."""
        ...

    @abstractmethod
    def get_payment_intent(self, payment_intent_id: str) -> PaymentIntent: ...

    @abstractmethod
    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None: ...
