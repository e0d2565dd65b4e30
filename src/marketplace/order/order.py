"""Order aggregate — one committed product-quantity purchase.

An order is immutable once placed except for ``status``, and it is never
deleted. The supplier is copied from the product when the order is placed
and never re-derived, so reassigning a product later cannot move existing
orders to a different supplier.

State Machine:
    PENDING → IN_PROGRESS → READY → DELIVERED
    PENDING → READY (SMS relay skips the in-progress step)
    PENDING / IN_PROGRESS / READY → CANCELLED

Status writes never go through ``repo.add(order)``. They are conditional
updates issued by ``OrderRepository`` (see ``order/repository.py``) so two
actors racing on the same order cannot both succeed.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced


class OrderStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Orders a supplier still has to prepare; these are what an SMS reply moves to READY
AWAITING_READINESS = (OrderStatus.PENDING, OrderStatus.IN_PROGRESS)

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.IN_PROGRESS, OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def assert_can_transition(current, target):
    """Raise ValidationError unless ``current → target`` is an edge of the state machine."""
    current, target = OrderStatus(current), OrderStatus(target)
    if target not in _VALID_TRANSITIONS[current]:
        raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})


@marketplace.aggregate
class Order:
    product_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    amount = Float(required=True, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    total_amount = Float(required=True, min_value=0.0)
    delivery_address = Text(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()

    @classmethod
    def place(cls, checkout_id, buyer_id, product, quantity, delivery_fee, delivery_address):
        """Create a pending order for one cart line.

        Args:
            product: The catalogue Product; its current price and supplier are
                locked onto the order.
            delivery_fee: This line's share of the cart's delivery fee.
        """
        now = datetime.now(UTC)
        amount = float(product.price) * quantity
        order = cls(
            checkout_id=checkout_id,
            product_id=str(product.id),
            buyer_id=buyer_id,
            supplier_id=str(product.supplier_id),
            quantity=quantity,
            amount=amount,
            delivery_fee=delivery_fee,
            total_amount=amount + delivery_fee,
            delivery_address=delivery_address,
            status=OrderStatus.PENDING.value,
            created_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                checkout_id=str(checkout_id),
                product_id=str(product.id),
                buyer_id=str(buyer_id),
                supplier_id=str(product.supplier_id),
                quantity=quantity,
                amount=amount,
                delivery_fee=delivery_fee,
                total_amount=order.total_amount,
                delivery_address=delivery_address,
                placed_at=now,
            )
        )
        return order

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES
