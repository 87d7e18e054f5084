from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Case, F, When
import logging

from .exceptions import InsufficientStockError, MenuItemNotFoundError
from .models import MenuItem

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Narrow read/stock interface the order lifecycle uses to reach the menu.
    Menu CRUD lives in the admin and is not part of this service.
    """

    @staticmethod
    def get_menu_item(menu_item_id) -> MenuItem:
        try:
            return MenuItem.objects.get(pk=menu_item_id)
        except (MenuItem.DoesNotExist, ValidationError, ValueError):
            raise MenuItemNotFoundError(menu_item_id)

    @staticmethod
    @transaction.atomic
    def decrement_stock(menu_item_id, quantity: int) -> MenuItem:
        """
        Atomically removes ``quantity`` units from a bounded-stock item.

        The decrement is a single conditional UPDATE, so two concurrent
        orders can never drive stock below zero: the loser matches no row
        and gets InsufficientStockError. Availability follows stock.
        """
        updated = MenuItem.objects.filter(
            pk=menu_item_id, stock_qty__gte=quantity
        ).update(stock_qty=F("stock_qty") - quantity)

        if not updated:
            menu_item = CatalogService.get_menu_item(menu_item_id)
            raise InsufficientStockError(
                menu_item, requested=quantity, remaining=menu_item.stock_qty or 0
            )

        MenuItem.objects.filter(pk=menu_item_id, stock_qty__lte=0).update(
            is_available=False
        )

        menu_item = MenuItem.objects.get(pk=menu_item_id)
        logger.info(
            f"Decremented stock for {menu_item.name} by {quantity} (remaining: {menu_item.stock_qty})"
        )
        return menu_item

    @staticmethod
    @transaction.atomic
    def restore_stock(menu_item_id, quantity: int) -> MenuItem:
        """
        Returns ``quantity`` units to a bounded-stock item.

        Only an item that ran out of stock is re-enabled; one switched off by
        staff while it still had stock stays off.
        """
        MenuItem.objects.filter(pk=menu_item_id, stock_qty__isnull=False).update(
            stock_qty=F("stock_qty") + quantity,
            # Right-hand side sees the stock before this update
            is_available=Case(
                When(stock_qty__lte=0, then=True), default=F("is_available")
            ),
        )
        menu_item = CatalogService.get_menu_item(menu_item_id)
        logger.info(
            f"Restored stock for {menu_item.name} by {quantity} (remaining: {menu_item.stock_qty})"
        )
        return menu_item
