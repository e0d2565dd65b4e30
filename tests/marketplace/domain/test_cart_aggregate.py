"""Tests for the Cart aggregate: line management, duplicates and totals."""

import pytest
from marketplace.cart.cart import DELIVERY_FEE, AddOutcome, Cart, compute_total
from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from protean.exceptions import ValidationError


def _cart_with(*lines):
    cart = Cart.create(buyer_id="buyer-001")
    for product_id, quantity in lines:
        cart.add_item(product_id=product_id, quantity=quantity)
    cart._events.clear()
    return cart


class TestAddItem:
    def test_add_new_product(self):
        cart = Cart.create(buyer_id="buyer-001")
        outcome, item_id = cart.add_item(product_id="prod-001", quantity=2)

        assert outcome is AddOutcome.ADDED
        assert len(cart.items) == 1
        assert str(cart.items[0].id) == item_id
        assert cart.items[0].quantity == 2

    def test_add_raises_item_added_event(self):
        cart = Cart.create(buyer_id="buyer-001")
        cart.add_item(product_id="prod-001")

        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartItemAdded)
        assert event.product_id == "prod-001"
        assert event.quantity == 1

    def test_duplicate_product_is_reported_not_added(self):
        cart = _cart_with(("prod-001", 1))
        existing_id = str(cart.items[0].id)

        outcome, item_id = cart.add_item(product_id="prod-001", quantity=3)

        assert outcome is AddOutcome.ALREADY_IN_CART
        assert item_id == existing_id
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1
        assert cart._events == []

    def test_zero_quantity_rejected(self):
        cart = Cart.create(buyer_id="buyer-001")
        with pytest.raises(ValidationError):
            cart.add_item(product_id="prod-001", quantity=0)


class TestUpdateItemQuantity:
    def test_update_quantity(self):
        cart = _cart_with(("prod-001", 1))
        item_id = str(cart.items[0].id)

        assert cart.update_item_quantity(item_id, 4) is True
        assert cart.items[0].quantity == 4

        event = cart._events[-1]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_below_one_is_ignored(self, quantity):
        cart = _cart_with(("prod-001", 2))
        item_id = str(cart.items[0].id)

        assert cart.update_item_quantity(item_id, quantity) is False
        assert cart.items[0].quantity == 2
        assert cart._events == []

    def test_same_quantity_is_noop(self):
        cart = _cart_with(("prod-001", 2))
        assert cart.update_item_quantity(str(cart.items[0].id), 2) is False
        assert cart._events == []

    def test_unknown_item_rejected(self):
        cart = _cart_with(("prod-001", 1))
        with pytest.raises(ValidationError) as exc:
            cart.update_item_quantity("missing", 3)
        assert "item_id" in exc.value.messages


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _cart_with(("prod-001", 1), ("prod-002", 1))
        item_id = str(cart.items[0].id)

        assert cart.remove_item(item_id) is True
        assert len(cart.items) == 1
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_remove_missing_item_is_noop(self):
        cart = _cart_with(("prod-001", 1))
        assert cart.remove_item("missing") is False
        assert len(cart.items) == 1

    def test_clear_drops_every_line(self):
        cart = _cart_with(("prod-001", 1), ("prod-002", 3))
        cart.clear()

        assert len(cart.items) == 0
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_count == 2

    def test_clear_empty_cart_raises_nothing(self):
        cart = Cart.create(buyer_id="buyer-001")
        cart.clear()
        assert cart._events == []


class TestTotals:
    def test_compute_total_adds_flat_fee_once(self):
        totals = compute_total([(100.0, 2), (50.0, 1)])
        assert totals == {"subtotal": 250.0, "delivery_fee": DELIVERY_FEE, "total": 300.0}

    def test_empty_cart_total_is_the_delivery_fee(self):
        totals = compute_total([])
        assert totals["subtotal"] == 0
        assert totals["total"] == DELIVERY_FEE

    def test_cart_total_uses_supplied_prices(self):
        cart = _cart_with(("prod-001", 2), ("prod-002", 1))
        totals = cart.compute_total({"prod-001": 100.0, "prod-002": 50.0})
        assert totals["subtotal"] == 250.0
        assert totals["total"] == 300.0
