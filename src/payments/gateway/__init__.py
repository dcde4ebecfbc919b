"""Payment service factory.

build_payment_service() picks the provider once, at composition time:
- StripePaymentService when a Stripe secret key is available
- SimulatedPaymentService otherwise (development and testing)
"""

import os

import structlog

from payments.gateway.port import PaymentIntent, PaymentService, RefundResult
from payments.gateway.simulated_adapter import SimulatedPaymentService
from payments.gateway.stripe_adapter import StripePaymentService

logger = structlog.get_logger(__name__)

__all__ = [
    "PaymentIntent",
    "PaymentService",
    "RefundResult",
    "SimulatedPaymentService",
    "StripePaymentService",
    "build_payment_service",
]


def build_payment_service(secret_key: str | None = None) -> PaymentService:
    """Return the payment provider for this process.

    An explicit ``secret_key`` wins over the ``STRIPE_SECRET_KEY`` environment
    variable. Without either, payments are simulated; in production that is
    allowed but logged as a warning.
    """
    key = secret_key or os.environ.get("STRIPE_SECRET_KEY")
    if key:
        logger.info("Using Stripe payment service")
        return StripePaymentService(api_key=key)

    if os.environ.get("PROTEAN_ENV") == "production":
        logger.warning("No Stripe secret key configured in production, payments will be simulated")
    else:
        logger.info("Using simulated payment service")
    return SimulatedPaymentService()
