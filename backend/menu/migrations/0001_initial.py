import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Name of the menu item.", max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, help_text="Current selling price. Orders snapshot this at order time.", max_digits=10)),
                ("category", models.CharField(choices=[("DRINKS", "Drinks"), ("MAIN_FOODS", "Main Foods"), ("SNACKS", "Snacks"), ("CABINET_FOOD", "Cabinet Food"), ("CAKES", "Cakes"), ("GIFTS", "Gifts")], default="DRINKS", max_length=20)),
                ("is_available", models.BooleanField(default=True, help_text="Unavailable items cannot be ordered.")),
                ("stock_qty", models.PositiveIntegerField(blank=True, help_text="Remaining stock. Only tracked for cabinet food.", null=True)),
                ("sizes", models.JSONField(blank=True, default=list, help_text='Optional size variants, e.g. [{"label": "Large", "price": "6.50"}]')),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Menu Item",
                "verbose_name_plural": "Menu Items",
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["category", "is_available"], name="menuitem_cat_avail_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("stock_qty__isnull", True), ("stock_qty__gte", 0), _connector="OR"),
                        name="menuitem_stock_non_negative",
                    )
                ],
            },
        ),
    ]
