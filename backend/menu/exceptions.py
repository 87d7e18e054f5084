"""
Custom exceptions for the menu catalog.
"""
from core_backend.exceptions import InvalidRequestError, NotFoundError


class MenuItemNotFoundError(NotFoundError):
    """Raised when a referenced menu item does not exist."""

    code = "menu_item_not_found"

    def __init__(self, menu_item_id, message=None):
        self.menu_item_id = menu_item_id
        if message is None:
            message = f"Menu item {menu_item_id} not found"
        super().__init__(message, details={"menu_item_id": str(menu_item_id)})


class InsufficientStockError(InvalidRequestError):
    """Raised when a bounded-stock item cannot cover the requested quantity."""

    code = "insufficient_stock"

    def __init__(self, menu_item, requested, remaining, message=None):
        self.menu_item = menu_item
        self.requested = requested
        self.remaining = remaining
        if message is None:
            message = f"Insufficient stock for {menu_item.name} (remaining: {remaining})"
        super().__init__(
            message,
            details={
                "menu_item_id": str(menu_item.pk),
                "name": menu_item.name,
                "requested": requested,
                "remaining": remaining,
            },
        )
