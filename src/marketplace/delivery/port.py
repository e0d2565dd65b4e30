"""Delivery port — abstract interface for the courier integration.

Orders that reach ``ready`` are handed to a courier for pickup. The courier
later confirms delivery through the ``RecordDelivery`` command.
"""

from abc import ABC, abstractmethod


class DeliveryPort(ABC):
    """Abstract interface for delivery adapters."""

    @abstractmethod
    def request_pickup(self, order_id: str, supplier_id: str, delivery_address: str) -> dict:
        """Ask the courier to collect an order from its supplier.

        Returns:
            dict with keys: pickup_id, status ("requested" or "failed"), error (optional)
        """
        ...
