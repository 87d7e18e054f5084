from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderApprovalMode(models.TextChoices):
    DIRECT = "DIRECT", _("Direct")
    REQUIRES_APPROVAL = "REQUIRES_APPROVAL", _("Requires Approval")


class CafeSettings(models.Model):
    """
    Singleton row holding café-wide business policy consumed by the order
    lifecycle: how new orders enter the workflow and when unpaid orders are
    auto-cleared.
    """

    cafe_name = models.CharField(max_length=100, default="BrewPoint Café")
    currency = models.CharField(
        max_length=3,
        default="IDR",
        help_text="Three-letter currency code (ISO 4217).",
    )

    # === ORDER INTAKE ===
    order_approval_mode = models.CharField(
        max_length=20,
        choices=OrderApprovalMode.choices,
        default=OrderApprovalMode.DIRECT,
        help_text="When REQUIRES_APPROVAL, new orders wait in PENDING_APPROVAL for staff.",
    )

    # === AUTO-CLEAR WINDOWS ===
    normal_order_clear_hours = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("1.00"),
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Unpaid non-cake orders older than this many hours are cancelled.",
    )
    cake_order_clear_days = models.PositiveIntegerField(
        default=2,
        validators=[MinValueValidator(1)],
        help_text="Days a cake order has to receive its down payment.",
    )
    auto_clear_unapproved_minutes = models.PositiveIntegerField(
        default=30,
        validators=[MinValueValidator(1)],
        help_text="Orders left in PENDING_APPROVAL longer than this are cancelled.",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Cafe Settings"
        verbose_name_plural = "Cafe Settings"

    def clean(self):
        if CafeSettings.objects.exclude(pk=self.pk).exists():
            raise ValidationError("There can only be one CafeSettings instance.")

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "CafeSettings":
        """Returns the settings row, creating it with defaults on first use."""
        settings_obj = cls.objects.order_by("pk").first()
        if settings_obj is None:
            settings_obj = cls()
            settings_obj.save()
        return settings_obj

    def __str__(self):
        return f"Cafe Settings ({self.cafe_name})"
