"""
Custom exceptions for the order lifecycle.

Catalog failures (missing menu item, insufficient stock) are raised by the
menu app and re-exported here so callers can catch every order-intake
failure from one module.
"""
from core_backend.exceptions import ConflictError, InvalidRequestError, NotFoundError
from menu.exceptions import InsufficientStockError, MenuItemNotFoundError

__all__ = [
    "OrderNotFoundError",
    "MenuItemNotFoundError",
    "InvalidOrderRequestError",
    "InsufficientStockError",
    "OrderConflictError",
    "InvalidStatusTransitionError",
]


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"

    def __init__(self, lookup, message=None):
        self.lookup = lookup
        if message is None:
            message = f"Order {lookup} not found"
        super().__init__(message, details={"lookup": str(lookup)})


class InvalidOrderRequestError(InvalidRequestError):
    """Raised when an order payload fails intake validation."""

    code = "invalid_order_request"


class OrderConflictError(ConflictError):
    """
    Raised when an order is not in a state that allows the requested action,
    or when a concurrent writer changed it first.
    """

    code = "order_conflict"


class InvalidStatusTransitionError(OrderConflictError):
    code = "invalid_status_transition"

    def __init__(self, from_status, to_status, message=None):
        self.from_status = from_status
        self.to_status = to_status
        if message is None:
            message = f"Cannot transition order from {from_status} to {to_status}"
        super().__init__(
            message, details={"from": str(from_status), "to": str(to_status)}
        )
