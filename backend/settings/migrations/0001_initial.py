from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CafeSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cafe_name", models.CharField(default="BrewPoint Café", max_length=100)),
                ("currency", models.CharField(default="IDR", help_text="Three-letter currency code (ISO 4217).", max_length=3)),
                ("order_approval_mode", models.CharField(choices=[("DIRECT", "Direct"), ("REQUIRES_APPROVAL", "Requires Approval")], default="DIRECT", help_text="When REQUIRES_APPROVAL, new orders wait in PENDING_APPROVAL for staff.", max_length=20)),
                ("normal_order_clear_hours", models.DecimalField(decimal_places=2, default=Decimal("1.00"), help_text="Unpaid non-cake orders older than this many hours are cancelled.", max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("cake_order_clear_days", models.PositiveIntegerField(default=2, help_text="Days a cake order has to receive its down payment.", validators=[django.core.validators.MinValueValidator(1)])),
                ("auto_clear_unapproved_minutes", models.PositiveIntegerField(default=30, help_text="Orders left in PENDING_APPROVAL longer than this are cancelled.", validators=[django.core.validators.MinValueValidator(1)])),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Cafe Settings",
                "verbose_name_plural": "Cafe Settings",
            },
        ),
    ]
