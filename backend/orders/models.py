import uuid
from decimal import Decimal
from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from menu.models import MenuItem
from tables.models import Table


class Order(models.Model):
    # --- Status Fields ---
    class OrderStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")  # Placed, waiting for payment
        PAID = "PAID", _("Paid")
        PENDING_APPROVAL = "PENDING_APPROVAL", _("Pending Approval")  # Waiting for staff review
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")
        WAITING = "WAITING", _("Waiting")  # In the kitchen queue
        COOKING = "COOKING", _("Cooking")
        COMPLETED = "COMPLETED", _("Completed")
        CANCELLED = "CANCELLED", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        PARTIAL = "PARTIAL", _("Partially Paid")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")

    class Language(models.TextChoices):
        EN = "EN", _("English")
        ID = "ID", _("Indonesian")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=32,
        unique=True,
        editable=False,
        help_text=_("Human-facing number, ORD-YYYYMMDD-NNN. Unique and immutable."),
    )

    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    # --- Customer ---
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(
        max_length=30,
        db_index=True,
        help_text=_("Free text. Used as the lookup key for anonymous customers."),
    )
    language = models.CharField(
        max_length=2, choices=Language.choices, default=Language.EN
    )
    notes = models.TextField(blank=True)

    # --- Relationships ---
    table = models.ForeignKey(
        Table,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="handled_orders",
        help_text=_("Staff member who last acted on this order."),
    )

    # --- Financial Fields ---
    total_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    is_cake_order = models.BooleanField(default=False)
    down_payment_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("50% of the total. Set only for cake orders."),
    )
    down_payment_due_date = models.DateTimeField(null=True, blank=True)
    cake_pickup_date = models.DateTimeField(null=True, blank=True)
    cake_notes = models.TextField(blank=True)

    # --- Lifecycle markers ---
    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    cooking_started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp when order was marked as COMPLETED.",
    )

    # Durations in whole minutes, stamped by status transitions
    preparation_duration = models.PositiveIntegerField(null=True, blank=True)
    cooking_duration = models.PositiveIntegerField(null=True, blank=True)
    total_duration = models.PositiveIntegerField(null=True, blank=True)

    auto_cleared = models.BooleanField(
        default=False,
        help_text=_("Set when the sweep cancelled this order. Auto-cleared orders are never swept again."),
    )
    auto_cleared_at = models.DateTimeField(null=True, blank=True)

    table_cleared = models.BooleanField(default=False)
    table_cleared_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_stat_created_idx"),
            models.Index(fields=["payment_status", "status"], name="order_pay_stat_idx"),
            models.Index(
                fields=["auto_cleared", "payment_status", "is_cake_order"],
                name="order_autoclear_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(is_cake_order=True, down_payment_amount__isnull=False)
                    | models.Q(is_cake_order=False, down_payment_amount__isnull=True)
                ),
                name="order_down_payment_iff_cake",
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number} - {self.status}/{self.payment_status}"

    @property
    def items_total(self) -> Decimal:
        return sum((item.subtotal for item in self.items.all()), Decimal("0.00"))


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.PROTECT, related_name="order_items"
    )
    quantity = models.PositiveIntegerField()

    # Price snapshot
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Catalog price at the time of the order. Never recomputed."),
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    size_label = models.CharField(max_length=50, blank=True)
    notes = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'less sugar'")
    )
    position = models.PositiveIntegerField(
        default=0, help_text=_("Line position within the order as requested.")
    )

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["order", "position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="orderitem_quantity_positive"
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.menu_item.name} in Order {self.order.order_number}"
