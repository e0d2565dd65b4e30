"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartItemAdded:
    __version__ = "v1"

    cart_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartQuantityUpdated:
    __version__ = "v1"

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemRemoved:
    __version__ = "v1"

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@marketplace.event(part_of="Cart")
class CartCleared:
    """All lines were removed from the cart after a successful checkout."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    items_count = Integer(required=True)
