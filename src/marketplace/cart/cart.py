"""Cart aggregate — a buyer's unconfirmed selection of products.

Each buyer has at most one cart and each product appears in it at most once.
Adding a product that is already present is not an error: the add reports
``already_in_cart`` and leaves the existing line untouched. Quantities are
adjusted explicitly through ``update_item_quantity``.

Prices are not stored on cart lines; they are resolved from the catalogue
whenever totals are computed, and locked onto orders at checkout.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.domain import marketplace

# Flat delivery fee for a whole cart, in birr, regardless of how many lines it has
DELIVERY_FEE = 50.0


class AddOutcome(Enum):
    ADDED = "added"
    ALREADY_IN_CART = "already_in_cart"


def compute_total(lines, delivery_fee=DELIVERY_FEE):
    """Total a cart.

    Args:
        lines: Iterable of ``(unit_price, quantity)`` pairs.
        delivery_fee: Fee charged once for the whole cart.

    Returns:
        dict with ``subtotal``, ``delivery_fee`` and ``total``.
    """
    subtotal = sum(float(price) * quantity for price, quantity in lines)
    return {
        "subtotal": subtotal,
        "delivery_fee": delivery_fee,
        "total": subtotal + delivery_fee,
    }


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    buyer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, buyer_id):
        now = datetime.now(UTC)
        return cls(buyer_id=buyer_id, created_at=now, updated_at=now)

    def _find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def item_for_product(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity=1):
        """Add a product to the cart.

        Returns:
            ``(AddOutcome, item_id)``. A product already in the cart yields
            ``ALREADY_IN_CART`` with the existing line's id and no change.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.item_for_product(product_id)
        if existing is not None:
            return AddOutcome.ALREADY_IN_CART, str(existing.id)

        now = datetime.now(UTC)
        item = CartItem(product_id=product_id, quantity=quantity, added_at=now)
        self.add_items(item)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                buyer_id=str(self.buyer_id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return AddOutcome.ADDED, str(item.id)

    def update_item_quantity(self, item_id, new_quantity):
        """Overwrite a line's quantity. Quantities below 1 are ignored.

        Returns True when the quantity changed.
        """
        if new_quantity is None or new_quantity < 1:
            return False

        item = self._find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        previous_quantity = item.quantity
        if previous_quantity == new_quantity:
            return False

        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )
        return True

    def remove_item(self, item_id):
        """Remove a line. Removing a line that is not there is a no-op."""
        item = self._find_item(item_id)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))
        return True

    def clear(self):
        """Drop every line. Used once checkout has turned them into orders."""
        items = list(self.items)
        if not items:
            return

        for item in items:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                buyer_id=str(self.buyer_id),
                items_count=len(items),
            )
        )

    def compute_total(self, prices, delivery_fee=DELIVERY_FEE):
        """Total the cart against ``prices``, a mapping of product id to unit price."""
        return compute_total(
            ((prices[str(item.product_id)], item.quantity) for item in self.items),
            delivery_fee=delivery_fee,
        )
