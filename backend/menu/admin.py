from django.contrib import admin
from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "is_available", "stock_qty", "updated_at")
    list_filter = ("category", "is_available")
    search_fields = ("name",)
    list_editable = ("is_available",)
    ordering = ("category", "name")
