"""Marketplace-specific exceptions.

Field-level problems are reported with protean's ``ValidationError`` and
missing rows with ``ObjectNotFoundError``; the errors below cover the two
outcomes protean has no vocabulary for.
"""


class NotPermittedError(Exception):
    """The acting profile may not perform this operation on this record."""

    def __init__(self, message: str = "Not permitted"):
        super().__init__(message)
        self.message = message


class StaleTransitionError(Exception):
    """A compare-and-set status write matched zero rows.

    Another actor moved the order first, so the expected pre-state no longer
    holds. Callers should re-read the order rather than retry blindly.
    """

    def __init__(self, order_id: str, target: str):
        self.order_id = order_id
        self.target = target
        self.message = f"Order {order_id} has already been moved on by someone else; cannot change it to {target}"
        super().__init__(self.message)
