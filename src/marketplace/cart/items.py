"""Cart line management — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import AddOutcome, Cart
from marketplace.cart.repository import CartRepository  # noqa: F401
from marketplace.catalogue.product import Product
from marketplace.domain import logger, marketplace
from marketplace.profile.profile import Role
from marketplace.shared.context import load_actor


@marketplace.command(part_of="Cart")
class AddToCart:
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    actor_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)  # Values below 1 are ignored, not rejected


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    actor_id = Identifier(required=True)
    item_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        actor = load_actor(command.actor_id, Role.CLIENT)

        product = current_domain.repository_for(Product).get(command.product_id)
        if not product.is_active:
            raise ValidationError({"product_id": ["This product is not available"]})

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create_for_buyer(actor.profile_id)
        outcome, item_id = cart.add_item(product_id=str(product.id), quantity=command.quantity or 1)

        if outcome is AddOutcome.ALREADY_IN_CART:
            logger.info("Product already in cart", buyer_id=actor.profile_id, product_id=str(product.id))
        else:
            repo.add(cart)

        return {"status": outcome.value, "item_id": item_id}

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        actor = load_actor(command.actor_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_buyer(actor.profile_id)
        if cart is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        if cart.update_item_quantity(item_id=command.item_id, new_quantity=command.new_quantity):
            repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        actor = load_actor(command.actor_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_buyer(actor.profile_id)
        if cart is not None and cart.remove_item(item_id=command.item_id):
            repo.add(cart)
