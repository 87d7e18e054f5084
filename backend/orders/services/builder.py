"""
Order builder: turns a requested item list into priced order lines.

The builder only reads the catalog. Persisting the order and decrementing
stock happen in ``OrderService.create_order`` inside one transaction.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
import logging

from django.utils import timezone

from menu.exceptions import InsufficientStockError
from menu.models import MenuItem
from menu.services import CatalogService
from orders.exceptions import InvalidOrderRequestError
from orders.models import Order
from settings.config import OrderPolicy

logger = logging.getLogger(__name__)

DOWN_PAYMENT_RATE = Decimal("0.5")
CENTS = Decimal("0.01")


@dataclass
class OrderLine:
    menu_item: MenuItem
    quantity: int
    unit_price: Decimal
    notes: str = ""
    size_label: str = ""
    position: int = 0

    @property
    def subtotal(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(CENTS)


@dataclass
class OrderDraft:
    """A priced, validated order that has not been persisted yet."""

    lines: List[OrderLine]
    status: str
    total_amount: Decimal
    is_cake_order: bool
    created_at: datetime
    down_payment_amount: Optional[Decimal] = None
    down_payment_due_date: Optional[datetime] = None
    bounded_quantities: dict = field(default_factory=dict)

    def order_fields(self) -> dict:
        return {
            "status": self.status,
            "payment_status": Order.PaymentStatus.PENDING,
            "total_amount": self.total_amount,
            "is_cake_order": self.is_cake_order,
            "down_payment_amount": self.down_payment_amount,
            "down_payment_due_date": self.down_payment_due_date,
            "created_at": self.created_at,
        }


def calculate_down_payment(total_amount: Decimal) -> Decimal:
    """Half of the total, rounded half-up to cents."""
    return (total_amount * DOWN_PAYMENT_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)


def _parse_quantity(raw, position):
    # bool is an int subclass and never a meaningful quantity
    if isinstance(raw, bool):
        raw = None
    try:
        quantity = int(raw)
        if isinstance(raw, (float, Decimal)) and quantity != raw:
            raise ValueError
        if isinstance(raw, str) and not raw.strip().isdigit():
            raise ValueError
    except (TypeError, ValueError):
        raise InvalidOrderRequestError(
            f"Quantity for line {position + 1} must be a whole number",
            details={"line": position, "quantity": str(raw)},
        )
    if quantity < 1:
        raise InvalidOrderRequestError(
            f"Quantity for line {position + 1} must be at least 1",
            details={"line": position, "quantity": quantity},
        )
    return quantity


class OrderBuilder:
    """
    Validates and prices requested order lines against the catalog.

    The ``OrderPolicy`` is passed in by the caller so the builder never
    reaches into settings on its own.
    """

    def __init__(self, policy: OrderPolicy):
        self.policy = policy

    def build(self, items: Iterable[dict], now: Optional[datetime] = None) -> OrderDraft:
        """
        Builds a draft order for a new order.

        Each item is a mapping with ``menu_item_id``, ``quantity`` and
        optionally ``notes`` and ``size_label``.

        Raises:
            InvalidOrderRequestError: empty item list, bad quantity, unknown
                size or an unavailable item.
            MenuItemNotFoundError: a referenced menu item does not exist.
            InsufficientStockError: a bounded-stock item cannot cover the
                total quantity requested across all lines.
        """
        now = now or timezone.now()
        lines = self.build_lines(items)
        draft = self.summarize(lines, created_at=now)
        draft.status = self.initial_status()
        return draft

    def initial_status(self) -> str:
        if self.policy.requires_approval:
            return Order.OrderStatus.PENDING_APPROVAL
        return Order.OrderStatus.PENDING

    def build_lines(self, items: Iterable[dict]) -> List[OrderLine]:
        items = list(items or [])
        if not items:
            raise InvalidOrderRequestError("An order must contain at least one item")

        lines = []
        for position, item in enumerate(items):
            menu_item_id = item.get("menu_item_id")
            if menu_item_id in (None, ""):
                raise InvalidOrderRequestError(
                    f"Line {position + 1} is missing a menu item",
                    details={"line": position},
                )
            quantity = _parse_quantity(item.get("quantity"), position)
            menu_item = CatalogService.get_menu_item(menu_item_id)

            if not menu_item.is_available:
                raise InvalidOrderRequestError(
                    f"{menu_item.name} is currently unavailable",
                    details={"menu_item_id": str(menu_item.pk), "name": menu_item.name},
                )

            size_label = item.get("size_label") or ""
            unit_price = menu_item.price
            if size_label:
                unit_price = menu_item.price_for_size(size_label)
                if unit_price is None:
                    raise InvalidOrderRequestError(
                        f"{menu_item.name} has no size '{size_label}'",
                        details={
                            "menu_item_id": str(menu_item.pk),
                            "size_label": size_label,
                        },
                    )

            lines.append(
                OrderLine(
                    menu_item=menu_item,
                    quantity=quantity,
                    unit_price=unit_price,
                    notes=item.get("notes") or "",
                    size_label=size_label,
                    position=position,
                )
            )

        self._check_stock(lines)
        return lines

    def summarize(self, lines: List[OrderLine], created_at: datetime) -> OrderDraft:
        """Computes totals, cake flags and down payment for already validated lines."""
        total_amount = sum((line.subtotal for line in lines), Decimal("0.00"))
        is_cake_order = any(line.menu_item.is_cake for line in lines)

        draft = OrderDraft(
            lines=lines,
            status=Order.OrderStatus.PENDING,
            total_amount=total_amount,
            is_cake_order=is_cake_order,
            created_at=created_at,
            bounded_quantities=bounded_quantities(lines),
        )
        if is_cake_order:
            draft.down_payment_amount = calculate_down_payment(total_amount)
            draft.down_payment_due_date = created_at + self.policy.down_payment_window
        return draft

    @staticmethod
    def _check_stock(lines: List[OrderLine]):
        items_by_id = {line.menu_item.pk: line.menu_item for line in lines}
        for menu_item_id, quantity in bounded_quantities(lines).items():
            menu_item = items_by_id[menu_item_id]
            remaining = menu_item.stock_qty or 0
            if remaining < quantity:
                raise InsufficientStockError(menu_item, requested=quantity, remaining=remaining)


def bounded_quantities(lines: Iterable[OrderLine]) -> dict:
    """Total quantity per bounded-stock menu item id across ``lines``."""
    totals = defaultdict(int)
    for line in lines:
        if line.menu_item.has_bounded_stock:
            totals[line.menu_item.pk] += line.quantity
    return dict(totals)
