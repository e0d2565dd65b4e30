"""Marketplace bounded context — HerTrade profiles, listings, carts and orders.

Handles the order lifecycle end to end: the buyer's cart, the checkout that
turns cart lines into orders, and the two channels suppliers use to advance
an order (the in-app actions and the SMS keyword relay).
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")
