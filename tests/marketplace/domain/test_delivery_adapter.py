"""Tests for the delivery adapter registry and the fake courier."""

import pytest
from marketplace.delivery import get_delivery, reset_delivery
from marketplace.delivery.fake_adapter import FakeDelivery


def test_fake_adapter_by_default():
    assert isinstance(get_delivery(), FakeDelivery)
    assert get_delivery() is get_delivery()


def test_unknown_adapter(monkeypatch):
    reset_delivery()
    monkeypatch.setenv("DELIVERY_ADAPTER", "pigeon")
    with pytest.raises(ValueError):
        get_delivery()


class TestFakeDelivery:
    def test_records_pickup(self):
        delivery = FakeDelivery()
        result = delivery.request_pickup(order_id="ord-001", supplier_id="sup-001", delivery_address="Bole")

        assert result["status"] == "requested"
        assert delivery.pickups[0]["order_id"] == "ord-001"

    def test_configured_failure(self):
        delivery = FakeDelivery()
        delivery.configure(should_succeed=False, failure_reason="No riders")

        result = delivery.request_pickup(order_id="ord-001", supplier_id="sup-001", delivery_address="Bole")
        assert result == {"pickup_id": None, "status": "failed", "error": "No riders"}
        assert delivery.pickups == []
