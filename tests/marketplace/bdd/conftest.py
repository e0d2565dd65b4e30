"""Shared BDD fixtures and step definitions for the marketplace."""

import pytest
from marketplace.cart.cart import Cart
from marketplace.cart.items import AddToCart
from marketplace.catalogue.listing import ListProduct
from marketplace.checkout.checkout import Checkout
from marketplace.order.order import Order
from marketplace.profile.registration import RegisterProfile
from marketplace.sms.relay import ReceiveSmsKeyword
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def relay_result():
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a supplier without a smartphone registered with phone "{phone}"'),
    target_fixture="supplier_id",
)
def sms_supplier(phone):
    return current_domain.process(
        RegisterProfile(user_id="auth-bdd-supplier", name="Tigist", role="supplier", phone=phone, has_smartphone=False),
        asynchronous=False,
    )


@given(parsers.cfparse('the supplier lists "{name}" at {price:d} birr'))
def supplier_lists(supplier_id, products, name, price):
    products[name] = current_domain.process(
        ListProduct(actor_id=supplier_id, name=name, price=float(price), stock=10),
        asynchronous=False,
    )


def _add(buyer_id, product_id, quantity):
    current_domain.process(
        AddToCart(actor_id=buyer_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('a buyer has {qty:d} "{name}" in the cart'))
def buyer_has_in_cart(buyer_id, products, qty, name):
    _add(buyer_id, products[name], qty)


@given(
    parsers.cfparse('a buyer has checked out {qty1:d} "{name1}" and {qty2:d} "{name2}" to "{address}"'),
    target_fixture="order_ids",
)
def buyer_checked_out(buyer_id, products, qty1, name1, qty2, name2, address):
    _add(buyer_id, products[name1], qty1)
    _add(buyer_id, products[name2], qty2)
    return current_domain.process(Checkout(actor_id=buyer_id, delivery_address=address), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an SMS "{keyword}" arrives from "{phone}"'))
@when(parsers.cfparse('an SMS "{keyword}" arrives from "{phone}"'))
def sms_arrives(relay_result, keyword, phone):
    relay_result.clear()
    relay_result.update(
        current_domain.process(ReceiveSmsKeyword(phone=phone, keyword=keyword), asynchronous=False)
    )


@when(parsers.re(r'the buyer checks out to "(?P<address>.*)"'))
def buyer_checks_out(buyer_id, error, address):
    try:
        current_domain.process(Checkout(actor_id=buyer_id, delivery_address=address), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the relay reports "{outcome}" with {count:d} orders'))
def relay_reports(relay_result, outcome, count):
    assert relay_result["outcome"] == outcome
    assert relay_result["updated_count"] == count


@then(parsers.cfparse('every order of the supplier is "{status}"'))
def every_order_is(supplier_id, status):
    orders = current_domain.repository_for(Order).find_for_supplier(supplier_id)
    assert orders
    assert {o.status for o in orders} == {status}


@then(parsers.cfparse("{count:d} pickups were requested"))
def pickups_requested(delivery, count):
    assert len(delivery.pickups) == count


@then(parsers.cfparse('the order for "{name}" totals {total:d} birr'))
def order_totals(buyer_id, products, name, total):
    orders = current_domain.repository_for(Order).find_for_buyer(buyer_id)
    (order,) = [o for o in orders if o.product_id == products[name]]
    assert order.total_amount == float(total)


@then("the buyer's cart is empty")
def cart_is_empty(buyer_id):
    cart = current_domain.repository_for(Cart).find_for_buyer(buyer_id)
    assert len(cart.items) == 0


@then(parsers.cfparse("the buyer's cart has {count:d} line"))
def cart_has_lines(buyer_id, count):
    cart = current_domain.repository_for(Cart).find_for_buyer(buyer_id)
    assert len(cart.items) == count


@then(parsers.cfparse('the checkout is rejected with "{message}"'))
def checkout_rejected(error, message):
    assert error["exc"] is not None
    assert message in error["exc"].messages["delivery_address"]


@then("the buyer has no orders")
def buyer_has_no_orders(buyer_id):
    assert current_domain.repository_for(Order).find_for_buyer(buyer_id) == []
