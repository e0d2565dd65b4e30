"""Product listing — commands and handler for a supplier's own catalogue."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.profile.profile import Role
from marketplace.shared.context import load_actor
from marketplace.shared.errors import NotPermittedError


@marketplace.command(part_of="Product")
class ListProduct:
    actor_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category = String(max_length=100)
    description = Text()
    image_url = String(max_length=500)


@marketplace.command(part_of="Product")
class ChangeProductStatus:
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Product)
class ManageListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        actor = load_actor(command.actor_id, Role.SUPPLIER)

        product = Product.create(
            supplier_id=actor.profile_id,
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            category=command.category,
            description=command.description,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductStatus)
    def change_product_status(self, command):
        actor = load_actor(command.actor_id, Role.SUPPLIER)

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if str(product.supplier_id) != actor.profile_id:
            raise NotPermittedError("Only the owning supplier can change this product")

        product.change_status(command.status)
        repo.add(product)
