"""Ordering bounded context: plaque orders, payment state and fulfillment.

Owns the Order aggregate: created at checkout with a pending payment,
advanced only by verified payment-provider events, and tracked through
fulfillment with an append-only status history.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
