from django.contrib import admin
from .models import CafeSettings


@admin.register(CafeSettings)
class CafeSettingsAdmin(admin.ModelAdmin):
    list_display = (
        "cafe_name",
        "order_approval_mode",
        "normal_order_clear_hours",
        "cake_order_clear_days",
        "auto_clear_unapproved_minutes",
        "updated_at",
    )

    def has_add_permission(self, request):
        # Singleton: allow adding only if no instance exists
        return not CafeSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
