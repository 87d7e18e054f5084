from rest_framework import serializers
from orders.models import Order, OrderItem
from tables.models import Table


class OrderItemSerializer(serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source="menu_item.name", read_only=True)
    menu_item_category = serializers.CharField(source="menu_item.category", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "menu_item",
            "menu_item_name",
            "menu_item_category",
            "quantity",
            "unit_price",
            "subtotal",
            "size_label",
            "notes",
        ]
        read_only_fields = fields
        select_related_fields = ["menu_item"]


class OrderSerializer(serializers.ModelSerializer):
    """
    Full order representation returned by every endpoint and carried by
    every broadcast event.
    """

    items = OrderItemSerializer(many=True, read_only=True)
    table_number = serializers.CharField(source="table.table_number", read_only=True, default=None)
    staff_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "payment_status",
            "customer_name",
            "customer_phone",
            "language",
            "notes",
            "table",
            "table_number",
            "staff",
            "staff_name",
            "total_amount",
            "is_cake_order",
            "down_payment_amount",
            "down_payment_due_date",
            "cake_pickup_date",
            "cake_notes",
            "created_at",
            "updated_at",
            "paid_at",
            "cooking_started_at",
            "completed_at",
            "preparation_duration",
            "cooking_duration",
            "total_duration",
            "auto_cleared",
            "auto_cleared_at",
            "table_cleared",
            "table_cleared_at",
            "items",
        ]
        read_only_fields = fields
        select_related_fields = ["table", "staff"]
        prefetch_related_fields = ["items__menu_item"]

    def get_staff_name(self, obj):
        if obj.staff is None:
            return None
        return obj.staff.get_full_name() or obj.staff.get_username()


class OrderItemInputSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    size_label = serializers.CharField(required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    """
    Validates the shape of an incoming order. Catalog checks (availability,
    stock, sizes) happen in the order builder.
    """

    customer_name = serializers.CharField(max_length=150)
    customer_phone = serializers.CharField(max_length=30)
    language = serializers.ChoiceField(
        choices=Order.Language.choices, required=False, default=Order.Language.EN
    )
    table_id = serializers.PrimaryKeyRelatedField(
        queryset=Table.objects.filter(is_active=True),
        source="table",
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    cake_pickup_date = serializers.DateTimeField(required=False, allow_null=True)
    cake_notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderUpdateSerializer(serializers.Serializer):
    """Every field is optional; only the ones sent are changed."""

    customer_name = serializers.CharField(max_length=150, required=False)
    customer_phone = serializers.CharField(max_length=30, required=False)
    language = serializers.ChoiceField(choices=Order.Language.choices, required=False)
    table_id = serializers.PrimaryKeyRelatedField(
        queryset=Table.objects.filter(is_active=True),
        source="table",
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True)
    cake_pickup_date = serializers.DateTimeField(required=False, allow_null=True)
    cake_notes = serializers.CharField(required=False, allow_blank=True)
    items = OrderItemInputSerializer(many=True, required=False, allow_empty=False)


class OrderLookupSerializer(serializers.Serializer):
    """Order number plus the phone it was placed with, used by customers without an account."""

    order_number = serializers.CharField(max_length=32)
    customer_phone = serializers.CharField(max_length=30)
