"""Shared fixtures for marketplace tests: profiles, products and filled carts."""

import pytest
from marketplace.cart.items import AddToCart
from marketplace.catalogue.listing import ListProduct
from marketplace.checkout.checkout import Checkout
from marketplace.delivery import get_delivery
from marketplace.profile.registration import RegisterProfile
from protean import current_domain

SMS_SUPPLIER_PHONE = "+251911234567"


def _register_profile(user_id, role, name=None, **extra):
    command = RegisterProfile(user_id=user_id, name=name or user_id, role=role, **extra)
    return current_domain.process(command, asynchronous=False)


def _list_product(supplier_id, name="Mesob basket", price=100.0, **extra):
    command = ListProduct(actor_id=supplier_id, name=name, price=price, **extra)
    return current_domain.process(command, asynchronous=False)


def _add_to_cart(buyer_id, product_id, quantity=1):
    command = AddToCart(actor_id=buyer_id, product_id=product_id, quantity=quantity)
    return current_domain.process(command, asynchronous=False)


def _checkout(buyer_id, delivery_address="Bole, Addis Ababa"):
    command = Checkout(actor_id=buyer_id, delivery_address=delivery_address)
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def admin_id():
    return _register_profile("auth-admin", "admin", name="Admin")


@pytest.fixture()
def buyer_id():
    return _register_profile("auth-buyer", "client", name="Selam")


@pytest.fixture()
def sms_supplier_id():
    """A supplier who only has a basic phone and reports readiness by SMS."""
    return _register_profile(
        "auth-sms-supplier",
        "supplier",
        name="Tigist",
        phone=SMS_SUPPLIER_PHONE,
        has_smartphone=False,
    )


@pytest.fixture()
def app_supplier_id():
    return _register_profile("auth-app-supplier", "supplier", name="Hana", phone="+251922345678")


@pytest.fixture()
def basket_id(sms_supplier_id):
    return _list_product(sms_supplier_id, name="Mesob basket", price=100.0, stock=5, category="crafts")


@pytest.fixture()
def tray_id(sms_supplier_id):
    return _list_product(sms_supplier_id, name="Injera tray", price=50.0, stock=10, category="crafts")


@pytest.fixture()
def placed_order_ids(buyer_id, basket_id, tray_id):
    """Checkout of 2 x 100 birr + 1 x 50 birr, both from the SMS supplier."""
    _add_to_cart(buyer_id, basket_id, quantity=2)
    _add_to_cart(buyer_id, tray_id, quantity=1)
    return _checkout(buyer_id)


@pytest.fixture()
def delivery():
    return get_delivery()


# Helpers exposed as fixtures so test modules in sub-directories can use them
@pytest.fixture()
def register_profile():
    return _register_profile


@pytest.fixture()
def list_product():
    return _list_product


@pytest.fixture()
def add_to_cart():
    return _add_to_cart


@pytest.fixture()
def checkout():
    return _checkout
