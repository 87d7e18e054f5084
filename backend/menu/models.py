import uuid
from decimal import Decimal
from django.db import models
from django.utils.translation import gettext_lazy as _


class MenuCategory(models.TextChoices):
    DRINKS = "DRINKS", _("Drinks")
    MAIN_FOODS = "MAIN_FOODS", _("Main Foods")
    SNACKS = "SNACKS", _("Snacks")
    CABINET_FOOD = "CABINET_FOOD", _("Cabinet Food")  # Finite stock, tracked per item
    CAKES = "CAKES", _("Cakes")  # Requires a down payment
    GIFTS = "GIFTS", _("Gifts")


# Categories whose items carry a finite stock_qty
BOUNDED_STOCK_CATEGORIES = frozenset({MenuCategory.CABINET_FOOD})


class MenuItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, help_text=_("Name of the menu item."))
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Current selling price. Orders snapshot this at order time."),
    )
    category = models.CharField(
        max_length=20, choices=MenuCategory.choices, default=MenuCategory.DRINKS
    )
    is_available = models.BooleanField(
        default=True,
        help_text=_("Unavailable items cannot be ordered."),
    )
    stock_qty = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Remaining stock. Only tracked for cabinet food."),
    )
    sizes = models.JSONField(
        default=list,
        blank=True,
        help_text=_('Optional size variants, e.g. [{"label": "Large", "price": "6.50"}]'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Menu Item")
        verbose_name_plural = _("Menu Items")
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["category", "is_available"], name="menuitem_cat_avail_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_qty__isnull=True) | models.Q(stock_qty__gte=0),
                name="menuitem_stock_non_negative",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def has_bounded_stock(self):
        return self.category in BOUNDED_STOCK_CATEGORIES

    @property
    def is_cake(self):
        return self.category == MenuCategory.CAKES

    def price_for_size(self, size_label):
        """
        Returns the price of the named size variant, or None when the item
        has no such size.
        """
        for size in self.sizes or []:
            if size.get("label") == size_label:
                return Decimal(str(size.get("price")))
        return None
