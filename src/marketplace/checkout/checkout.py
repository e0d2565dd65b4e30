"""Checkout — turns every line of a buyer's cart into a pending order.

The handler runs inside the unit of work protean opens for each command, so
the order inserts and the cart clean-up commit together: if any insert
fails, none of the orders persist and the cart is left as it was.

The cart's flat delivery fee is split evenly across its lines (not across
units), so each order carries ``DELIVERY_FEE / line_count``.
"""

from uuid import uuid4

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import DELIVERY_FEE, Cart
from marketplace.cart.repository import CartRepository  # noqa: F401
from marketplace.catalogue.product import Product
from marketplace.domain import logger, marketplace
from marketplace.order.order import Order
from marketplace.order.repository import OrderRepository  # noqa: F401
from marketplace.profile.profile import Role
from marketplace.shared.context import load_actor


@marketplace.command(part_of="Order")
class Checkout:
    actor_id = Identifier(required=True)
    delivery_address = Text()


def split_delivery_fee(delivery_fee, line_count):
    """Each cart line's share of the flat delivery fee."""
    if line_count < 1:
        return 0.0
    return delivery_fee / line_count


@marketplace.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        """Place one order per cart line and empty the cart.

        Returns:
            List of the new order ids; empty when the cart had no lines.
        """
        delivery_address = (command.delivery_address or "").strip()
        if not delivery_address:
            raise ValidationError({"delivery_address": ["Please enter delivery address"]})

        actor = load_actor(command.actor_id, Role.CLIENT)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.find_for_buyer(actor.profile_id)
        if cart is None or not cart.items:
            logger.info("Checkout of an empty cart", buyer_id=actor.profile_id)
            return []

        # Resolve every line before the first write
        product_repo = current_domain.repository_for(Product)
        lines = [(product_repo.get(item.product_id), item.quantity) for item in cart.items]
        fee_share = split_delivery_fee(DELIVERY_FEE, len(lines))
        checkout_id = str(uuid4())

        order_repo = current_domain.repository_for(Order)
        order_ids = []
        for product, quantity in lines:
            order = Order.place(
                checkout_id=checkout_id,
                buyer_id=actor.profile_id,
                product=product,
                quantity=quantity,
                delivery_fee=fee_share,
                delivery_address=delivery_address,
            )
            order_repo.add(order)
            order_ids.append(str(order.id))

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Checkout completed",
            buyer_id=actor.profile_id,
            checkout_id=checkout_id,
            orders_count=len(order_ids),
        )
        return order_ids
