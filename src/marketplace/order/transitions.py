"""Order status transitions — commands and handler for the in-app actions.

Each command names the pre-state it expects. The handler checks who is
acting, then issues a compare-and-set write; if another actor (the SMS relay,
a second browser tab) moved the order first, the write matches nothing and
the command reports ``stale`` instead of overwriting.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.delivery import request_pickups
from marketplace.domain import logger, marketplace
from marketplace.order.order import Order, OrderStatus, assert_can_transition
from marketplace.order.repository import OrderRepository  # noqa: F401
from marketplace.profile.profile import Role
from marketplace.shared.context import load_actor
from marketplace.shared.errors import NotPermittedError


class TransitionOutcome(Enum):
    APPLIED = "applied"
    STALE = "stale"


@marketplace.command(part_of="Order")
class AcceptOrder:
    """Supplier starts working on a pending order."""

    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class MarkOrderReady:
    """Supplier reports an in-progress order as ready for pickup."""

    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class CancelOrder:
    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@marketplace.command(part_of="Order")
class RecordDelivery:
    """The courier handed a ready order to the buyer."""

    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)


def compare_and_set(order, expected, target, changed_by):
    """Apply one guarded status write and describe what happened."""
    assert_can_transition(expected, target)

    repo = current_domain.repository_for(Order)
    if not repo.compare_and_set_status(order.id, expected, target):
        logger.info(
            "Stale order transition",
            order_id=str(order.id),
            expected=OrderStatus(expected).value,
            target=OrderStatus(target).value,
            changed_by=changed_by,
        )
        return {"order_id": str(order.id), "outcome": TransitionOutcome.STALE.value, "status": None}

    logger.info(
        "Order status changed",
        order_id=str(order.id),
        previous_status=OrderStatus(expected).value,
        new_status=OrderStatus(target).value,
        changed_by=changed_by,
        changed_at=datetime.now(UTC).isoformat(),
    )
    return {"order_id": str(order.id), "outcome": TransitionOutcome.APPLIED.value, "status": OrderStatus(target).value}


@marketplace.command_handler(part_of=Order)
class OrderTransitionsHandler:
    def _owned_order(self, actor_id, order_id):
        actor = load_actor(actor_id, Role.SUPPLIER)
        order = current_domain.repository_for(Order).get(order_id)
        if str(order.supplier_id) != actor.profile_id:
            raise NotPermittedError("Only the order's supplier can change its status")
        return actor, order

    @handle(AcceptOrder)
    def accept_order(self, command):
        actor, order = self._owned_order(command.actor_id, command.order_id)
        return compare_and_set(order, OrderStatus.PENDING, OrderStatus.IN_PROGRESS, changed_by=actor.profile_id)

    @handle(MarkOrderReady)
    def mark_order_ready(self, command):
        actor, order = self._owned_order(command.actor_id, command.order_id)
        result = compare_and_set(order, OrderStatus.IN_PROGRESS, OrderStatus.READY, changed_by=actor.profile_id)
        if result["outcome"] == TransitionOutcome.APPLIED.value:
            request_pickups([order])
        return result

    @handle(CancelOrder)
    def cancel_order(self, command):
        actor = load_actor(command.actor_id, Role.ADMIN)
        order = current_domain.repository_for(Order).get(command.order_id)

        # Conditioned on the status just read, so a concurrent move wins over the cancel
        result = compare_and_set(order, order.status, OrderStatus.CANCELLED, changed_by=actor.profile_id)
        if result["outcome"] == TransitionOutcome.APPLIED.value:
            logger.info("Order cancelled", order_id=str(order.id), reason=command.reason)
        return result

    @handle(RecordDelivery)
    def record_delivery(self, command):
        actor = load_actor(command.actor_id, Role.ADMIN)
        order = current_domain.repository_for(Order).get(command.order_id)
        return compare_and_set(order, OrderStatus.READY, OrderStatus.DELIVERED, changed_by=actor.profile_id)
