"""SMS keyword relay — lets suppliers without a smartphone report orders ready.

The SMS gateway integration decodes the inbound message and hands over the
sender's phone number and the keyword. Replying ``a`` moves every order the
supplier still has to prepare (``pending`` or ``in_progress``) to ``ready`` in
one conditional bulk update over the orders it read. Pickups are requested only
for the orders that update actually moved. A retransmitted SMS finds nothing
left to move and reports ``no_pending_orders`` without touching any order.

Only suppliers registered without smartphone capability can use this
channel; everyone else uses the in-app actions.
"""

from enum import Enum

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.delivery import request_pickups
from marketplace.domain import logger, marketplace
from marketplace.order.order import AWAITING_READINESS, Order, OrderStatus
from marketplace.order.repository import OrderRepository  # noqa: F401
from marketplace.profile.profile import Profile, Role, normalize_phone

READY_KEYWORD = "a"


class RelayOutcome(Enum):
    UPDATED = "updated"
    UNRECOGNIZED = "unrecognized"
    PROFILE_NOT_FOUND = "profile_not_found"
    NO_PENDING_ORDERS = "no_pending_orders"


_MESSAGES = {
    RelayOutcome.UNRECOGNIZED: 'Command not recognized. Send "a" to confirm your orders are ready.',
    RelayOutcome.PROFILE_NOT_FOUND: "Supplier profile not found",
    RelayOutcome.NO_PENDING_ORDERS: "No pending orders",
}


def normalize_keyword(keyword):
    return (keyword or "").strip().lower()


def _result(outcome, updated_count=0, message=None):
    return {
        "outcome": outcome.value,
        "updated_count": updated_count,
        "message": message or _MESSAGES[outcome],
    }


@marketplace.command(part_of="Order")
class ReceiveSmsKeyword:
    phone = String(required=True, max_length=20)
    keyword = String(max_length=160)


@marketplace.command_handler(part_of=Order)
class SmsKeywordRelayHandler:
    def _find_sms_supplier(self, phone):
        matches = (
            current_domain.repository_for(Profile)
            ._dao.query.filter(
                phone=normalize_phone(phone),
                role=Role.SUPPLIER.value,
                has_smartphone=False,
            )
            .all()
            .items
        )
        return matches[0] if matches else None

    @handle(ReceiveSmsKeyword)
    def receive_sms_keyword(self, command):
        keyword = normalize_keyword(command.keyword)
        logger.info("SMS received", phone=command.phone, keyword=keyword)

        if keyword != READY_KEYWORD:
            return _result(RelayOutcome.UNRECOGNIZED)

        supplier = self._find_sms_supplier(command.phone)
        if supplier is None:
            logger.warning("SMS from unknown supplier", phone=command.phone)
            return _result(RelayOutcome.PROFILE_NOT_FOUND)

        repo = current_domain.repository_for(Order)
        awaiting = repo.find_for_supplier(supplier.id, statuses=AWAITING_READINESS)
        if not awaiting:
            return _result(RelayOutcome.NO_PENDING_ORDERS)

        moved = repo.bulk_compare_and_set(awaiting, OrderStatus.READY)
        if not moved:
            # Everything moved between the read and the write
            return _result(RelayOutcome.NO_PENDING_ORDERS)

        request_pickups(moved)
        updated_count = len(moved)
        logger.info("Orders marked ready via SMS", supplier_id=str(supplier.id), updated_count=updated_count)

        noun = "order" if updated_count == 1 else "orders"
        return _result(
            RelayOutcome.UPDATED,
            updated_count=updated_count,
            message=f"{updated_count} {noun} marked as ready for pickup",
        )
