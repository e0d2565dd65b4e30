"""Fake delivery adapter — records pickup requests for testing."""

from uuid import uuid4

from marketplace.delivery.port import DeliveryPort


class FakeDelivery(DeliveryPort):
    """Delivery adapter that keeps pickup requests in memory."""

    def __init__(self):
        self.pickups: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Courier unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Courier unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def request_pickup(self, order_id: str, supplier_id: str, delivery_address: str) -> dict:
        if not self.should_succeed:
            return {"pickup_id": None, "status": "failed", "error": self.failure_reason}

        pickup_id = f"pickup-{uuid4().hex[:12]}"
        self.pickups.append(
            {
                "pickup_id": pickup_id,
                "order_id": order_id,
                "supplier_id": supplier_id,
                "delivery_address": delivery_address,
            }
        )
        return {"pickup_id": pickup_id, "status": "requested"}

    def reset(self):
        self.pickups.clear()
        self.should_succeed = True
        self.failure_reason = "Courier unavailable"
