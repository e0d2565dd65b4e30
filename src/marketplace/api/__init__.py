"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import (
    admin_router,
    cart_router,
    order_router,
    product_router,
    profile_router,
    sms_router,
    supplier_router,
)

__all__ = [
    "profile_router",
    "product_router",
    "cart_router",
    "order_router",
    "supplier_router",
    "admin_router",
    "sms_router",
    "register_error_handlers",
]
