"""Repository for the Cart aggregate."""

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace


@marketplace.repository(part_of=Cart)
class CartRepository:
    def find_for_buyer(self, buyer_id) -> Cart | None:
        """Return the buyer's cart, or None if they never added anything."""
        carts = self._dao.query.filter(buyer_id=str(buyer_id)).all().items
        if not carts:
            return None
        return self.get(carts[0].id)

    def get_or_create_for_buyer(self, buyer_id) -> Cart:
        cart = self.find_for_buyer(buyer_id)
        if cart is None:
            cart = Cart.create(buyer_id=buyer_id)
        return cart
