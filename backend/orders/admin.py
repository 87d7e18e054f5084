from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "quantity", "unit_price", "subtotal", "size_label", "notes")
    fields = ("menu_item", "quantity", "size_label", "unit_price", "subtotal", "notes")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.

    Status changes are made through the API so the state machine and the
    broadcast events stay in charge; the admin is for inspection.
    """

    list_display = (
        "order_number",
        "customer_name",
        "customer_phone",
        "table",
        "staff_name",
        "status",
        "payment_status",
        "get_total_formatted",
        "is_cake_order",
        "auto_cleared",
        "created_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "customer_name", "customer_phone")
    list_filter = (
        "status",
        "payment_status",
        "is_cake_order",
        "auto_cleared",
        "created_at",
    )

    inlines = [OrderItemInline]

    fieldsets = (
        (
            "Order Overview",
            {
                "fields": (
                    "id",
                    "order_number",
                    "customer_name",
                    "customer_phone",
                    "language",
                    "table",
                    "staff",
                    "status",
                    "payment_status",
                    "notes",
                )
            },
        ),
        (
            "Financial Summary",
            {
                "fields": (
                    "get_total_formatted",
                    "is_cake_order",
                    "down_payment_amount",
                    "down_payment_due_date",
                    "cake_pickup_date",
                    "cake_notes",
                ),
            },
        ),
        (
            "Timestamps",
            {
                "classes": ("collapse",),
                "fields": (
                    "created_at",
                    "updated_at",
                    "paid_at",
                    "cooking_started_at",
                    "completed_at",
                    "auto_cleared",
                    "auto_cleared_at",
                    "table_cleared",
                    "table_cleared_at",
                ),
            },
        ),
    )

    readonly_fields = (
        "id",
        "order_number",
        "status",
        "payment_status",
        "get_total_formatted",
        "is_cake_order",
        "down_payment_amount",
        "down_payment_due_date",
        "created_at",
        "updated_at",
        "paid_at",
        "cooking_started_at",
        "completed_at",
        "auto_cleared",
        "auto_cleared_at",
        "table_cleared",
        "table_cleared_at",
    )

    def get_queryset(self, request):
        """Optimize query performance by pre-fetching related objects."""
        return super().get_queryset(request).select_related("table", "staff")

    def has_add_permission(self, request):
        return False

    @admin.display(ordering="staff__username", description="Staff")
    def staff_name(self, obj):
        if obj.staff:
            full_name = f"{obj.staff.first_name} {obj.staff.last_name}".strip()
            # Fallback to username if the full name is blank
            return full_name or obj.staff.username
        return None

    @admin.display(ordering="total_amount", description="Total")
    def get_total_formatted(self, obj):
        return f"{obj.total_amount:,.2f}"
