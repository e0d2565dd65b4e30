"""Delivery adapter registry — pluggable courier integration."""

import os

from marketplace.domain import logger

_delivery_instance = None


def get_delivery():
    """Return the configured delivery adapter (singleton).

    Uses FakeDelivery by default. Other adapters are selected with the
    DELIVERY_ADAPTER environment variable.
    """
    global _delivery_instance
    if _delivery_instance is None:
        adapter = os.environ.get("DELIVERY_ADAPTER", "fake")
        if adapter == "fake":
            from marketplace.delivery.fake_adapter import FakeDelivery

            _delivery_instance = FakeDelivery()
        else:
            raise ValueError(f"Unknown delivery adapter: {adapter}")
    return _delivery_instance


def reset_delivery():
    """Drop the adapter singleton (useful for testing)."""
    global _delivery_instance
    _delivery_instance = None


def request_pickups(orders):
    """Request a courier pickup for each order that just became ready.

    A failed request is logged and does not undo the status change.
    """
    delivery = get_delivery()
    for order in orders:
        result = delivery.request_pickup(
            order_id=str(order.id),
            supplier_id=str(order.supplier_id),
            delivery_address=order.delivery_address,
        )
        if result.get("status") != "requested":
            logger.warning("Pickup request failed", order_id=str(order.id), error=result.get("error"))
