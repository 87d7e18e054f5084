import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("menu", "0001_initial"),
        ("tables", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.CharField(editable=False, help_text="Human-facing number, ORD-YYYYMMDD-NNN. Unique and immutable.", max_length=32, unique=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("PAID", "Paid"), ("PENDING_APPROVAL", "Pending Approval"), ("APPROVED", "Approved"), ("REJECTED", "Rejected"), ("WAITING", "Waiting"), ("COOKING", "Cooking"), ("COMPLETED", "Completed"), ("CANCELLED", "Cancelled")], default="PENDING", max_length=20)),
                ("payment_status", models.CharField(choices=[("PENDING", "Pending"), ("PARTIAL", "Partially Paid"), ("PAID", "Paid"), ("FAILED", "Failed")], default="PENDING", max_length=20)),
                ("customer_name", models.CharField(max_length=150)),
                ("customer_phone", models.CharField(db_index=True, help_text="Free text. Used as the lookup key for anonymous customers.", max_length=30)),
                ("language", models.CharField(choices=[("EN", "English"), ("ID", "Indonesian")], default="EN", max_length=2)),
                ("notes", models.TextField(blank=True)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("is_cake_order", models.BooleanField(default=False)),
                ("down_payment_amount", models.DecimalField(blank=True, decimal_places=2, help_text="50% of the total. Set only for cake orders.", max_digits=10, null=True)),
                ("down_payment_due_date", models.DateTimeField(blank=True, null=True)),
                ("cake_pickup_date", models.DateTimeField(blank=True, null=True)),
                ("cake_notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("cooking_started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, db_index=True, help_text="Timestamp when order was marked as COMPLETED.", null=True)),
                ("preparation_duration", models.PositiveIntegerField(blank=True, null=True)),
                ("cooking_duration", models.PositiveIntegerField(blank=True, null=True)),
                ("total_duration", models.PositiveIntegerField(blank=True, null=True)),
                ("auto_cleared", models.BooleanField(default=False, help_text="Set when the sweep cancelled this order. Auto-cleared orders are never swept again.")),
                ("auto_cleared_at", models.DateTimeField(blank=True, null=True)),
                ("table_cleared", models.BooleanField(default=False)),
                ("table_cleared_at", models.DateTimeField(blank=True, null=True)),
                ("staff", models.ForeignKey(blank=True, help_text="Staff member who last acted on this order.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="handled_orders", to=settings.AUTH_USER_MODEL)),
                ("table", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="tables.table")),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at", "-order_number"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="order_stat_created_idx"),
                    models.Index(fields=["payment_status", "status"], name="order_pay_stat_idx"),
                    models.Index(fields=["auto_cleared", "payment_status", "is_cake_order"], name="order_autoclear_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("down_payment_amount__isnull", False), ("is_cake_order", True)),
                            models.Q(("down_payment_amount__isnull", True), ("is_cake_order", False)),
                            _connector="OR",
                        ),
                        name="order_down_payment_iff_cake",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, help_text="Catalog price at the time of the order. Never recomputed.", max_digits=10)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("size_label", models.CharField(blank=True, max_length=50)),
                ("notes", models.TextField(blank=True, help_text="Customer notes, e.g., 'less sugar'")),
                ("position", models.PositiveIntegerField(default=0, help_text="Line position within the order as requested.")),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="menu.menuitem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["order", "position"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 1)), name="orderitem_quantity_positive")
                ],
            },
        ),
    ]
