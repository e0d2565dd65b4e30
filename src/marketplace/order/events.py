"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A cart line became an order at checkout."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    product_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    quantity = Integer(required=True)
    amount = Float(required=True)
    delivery_fee = Float(required=True)
    total_amount = Float(required=True)
    delivery_address = Text(required=True)
    placed_at = DateTime(required=True)

