"""Repository for the Order aggregate.

Besides the standard CRUD operations it exposes the conditional updates every
status change goes through. Each row write pushes the status predicate down to
the store (``update ... where id = ? and status = expected``) and reports
whether it matched, so the store itself arbitrates between concurrent writers.
"""

from marketplace.domain import marketplace
from marketplace.order.order import Order, OrderStatus


def _value(status):
    return status.value if isinstance(status, OrderStatus) else status


@marketplace.repository(part_of=Order)
class OrderRepository:
    def compare_and_set_status(self, order_id, expected, target) -> bool:
        """Move one order from ``expected`` to ``target``.

        Returns False when the order is no longer in ``expected``.
        """
        updated = self._dao.query.filter(id=str(order_id), status=_value(expected)).update_all(status=_value(target))
        return updated == 1

    def bulk_compare_and_set(self, orders, target) -> list[Order]:
        """Move each of ``orders`` from the status it was read in to ``target``.

        Only the orders passed in are touched. Returns those whose conditional
        write matched; orders another writer moved since the read are omitted.
        """
        return [order for order in orders if self.compare_and_set_status(order.id, order.status, target)]

    def find_for_supplier(self, supplier_id, statuses=None) -> list[Order]:
        query = self._dao.query.filter(supplier_id=str(supplier_id))
        if statuses:
            query = query.filter(status__in=[_value(status) for status in statuses])
        return query.order_by("-created_at").all().items

    def find_for_buyer(self, buyer_id) -> list[Order]:
        return self._dao.query.filter(buyer_id=str(buyer_id)).order_by("-created_at").all().items

    def find_for_checkout(self, checkout_id) -> list[Order]:
        return self._dao.query.filter(checkout_id=str(checkout_id)).all().items
