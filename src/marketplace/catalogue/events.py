"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A supplier put a new product on the marketplace."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    category = String()
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductStatusChanged:
    __version__ = "v1"

    product_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
