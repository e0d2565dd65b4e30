"""Read-side queries behind the marketplace, supplier and admin pages."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.cart.cart import DELIVERY_FEE, Cart
from marketplace.catalogue.product import Product, ProductStatus
from marketplace.order.order import Order, OrderStatus
from marketplace.profile.profile import Profile, Role

# Orders that still need the supplier or the courier
_OPEN_STATUSES = (OrderStatus.PENDING, OrderStatus.IN_PROGRESS, OrderStatus.READY)


def _profile_card(profile):
    return {
        "id": str(profile.id),
        "name": profile.name,
        "role": profile.role,
        "is_verified": bool(profile.is_verified),
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
    }


def _product_card(product):
    return {
        "id": str(product.id),
        "supplier_id": str(product.supplier_id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
        "category": product.category,
        "status": product.status,
        "image_url": product.image_url,
    }


def _order_row(order):
    return {
        "id": str(order.id),
        "product_id": str(order.product_id),
        "buyer_id": str(order.buyer_id),
        "supplier_id": str(order.supplier_id),
        "quantity": order.quantity,
        "amount": order.amount,
        "delivery_fee": order.delivery_fee,
        "total_amount": order.total_amount,
        "delivery_address": order.delivery_address,
        "status": order.status,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


def active_products(category=None):
    """Marketplace listing: active products, each joined with its supplier."""
    query = current_domain.repository_for(Product)._dao.query.filter(status=ProductStatus.ACTIVE.value)
    if category:
        query = query.filter(category=category)
    products = query.order_by("-created_at").all().items

    profile_repo = current_domain.repository_for(Profile)
    suppliers = {}
    listing = []
    for product in products:
        supplier_id = str(product.supplier_id)
        if supplier_id not in suppliers:
            try:
                suppliers[supplier_id] = _profile_card(profile_repo.get(supplier_id))
            except ObjectNotFoundError:
                suppliers[supplier_id] = None
        listing.append({**_product_card(product), "supplier": suppliers[supplier_id]})
    return listing


def supplier_profile(supplier_id):
    """Public supplier page: the profile and its active products."""
    profile = current_domain.repository_for(Profile).get(supplier_id)
    if profile.role != Role.SUPPLIER.value:
        raise ObjectNotFoundError(f"Supplier {supplier_id} not found")

    products = (
        current_domain.repository_for(Product)
        ._dao.query.filter(supplier_id=str(supplier_id), status=ProductStatus.ACTIVE.value)
        .all()
        .items
    )
    return {**_profile_card(profile), "products": [_product_card(p) for p in products]}


def cart_view(buyer_id):
    """The buyer's cart lines with current prices and the totals to pay on delivery."""
    cart = current_domain.repository_for(Cart).find_for_buyer(buyer_id)
    if cart is None or not cart.items:
        return {"items": [], "subtotal": 0.0, "delivery_fee": DELIVERY_FEE, "total": DELIVERY_FEE}

    product_repo = current_domain.repository_for(Product)
    products = {str(item.product_id): product_repo.get(item.product_id) for item in cart.items}
    totals = cart.compute_total({pid: product.price for pid, product in products.items()})

    items = [
        {
            "id": str(item.id),
            "quantity": item.quantity,
            "product": _product_card(products[str(item.product_id)]),
            "line_total": products[str(item.product_id)].price * item.quantity,
        }
        for item in cart.items
    ]
    return {"items": items, **totals}


def buyer_orders(buyer_id):
    return [_order_row(order) for order in current_domain.repository_for(Order).find_for_buyer(buyer_id)]


def supplier_orders(supplier_id):
    """Orders for a supplier, newest first."""
    return [_order_row(order) for order in current_domain.repository_for(Order).find_for_supplier(supplier_id)]


def supplier_dashboard(supplier_id):
    product_total = (
        current_domain.repository_for(Product)._dao.query.filter(supplier_id=str(supplier_id)).all().total
    )
    orders = current_domain.repository_for(Order).find_for_supplier(supplier_id)

    return {
        "total_products": product_total,
        "active_orders": sum(1 for o in orders if OrderStatus(o.status) in _OPEN_STATUSES),
        "total_earnings": sum(o.amount for o in orders if o.status != OrderStatus.CANCELLED.value),
    }


def admin_stats():
    profiles = current_domain.repository_for(Profile)._dao.query.all().items
    suppliers = [p for p in profiles if p.role == Role.SUPPLIER.value]

    return {
        "total_users": sum(1 for p in profiles if p.role in (Role.CLIENT.value, Role.SUPPLIER.value)),
        "active_suppliers": sum(1 for p in suppliers if p.is_verified),
        "pending_verifications": sum(1 for p in suppliers if not p.is_verified),
        "total_orders": current_domain.repository_for(Order)._dao.query.all().total,
    }
