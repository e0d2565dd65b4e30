import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api import (
    admin_router,
    cart_router,
    order_router,
    product_router,
    profile_router,
    register_error_handlers,
    sms_router,
    supplier_router,
)


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    for router in (
        profile_router,
        product_router,
        cart_router,
        order_router,
        supplier_router,
        admin_router,
        sms_router,
    ):
        app.include_router(router)
    return TestClient(app, raise_server_exceptions=False)


def as_profile(profile_id):
    return {"X-Profile-Id": profile_id}


@pytest.fixture()
def headers():
    """Build the request headers that identify the calling profile."""
    return as_profile
