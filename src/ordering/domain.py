"""Ordering bounded context — carts, orders and payment orchestration.

Converts a per-user cart into an immutable order, drives the order through
its status state machine, coordinates the payment provider, and credits the
artist sales ledger when an order is confirmed.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
