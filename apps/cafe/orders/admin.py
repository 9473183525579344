"""Admin registration for order models."""

from django.contrib import admin

from apps.cafe.orders.models import BreakfastOrderOption, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline for line items within an order."""

    model = OrderItem
    extra = 0
    fields = [
        "menu_item",
        "breakfast",
        "quantity",
        "unit_price",
        "supplement",
        "supplement_price",
    ]
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for orders. Orders are immutable apart from approval."""

    list_display = [
        "id",
        "order_type",
        "table",
        "delivery_address",
        "total_price",
        "approved",
        "created_at",
    ]
    list_filter = ["approved", "order_type"]
    search_fields = ["delivery_address", "session_id", "table__table_number"]
    inlines = [OrderItemInline]
    readonly_fields = [
        "total_price",
        "order_type",
        "delivery_address",
        "table",
        "promotion",
        "session_id",
        "created_at",
    ]
    date_hierarchy = "created_at"


@admin.register(BreakfastOrderOption)
class BreakfastOrderOptionAdmin(admin.ModelAdmin):
    """Admin for breakfast option selections."""

    list_display = ["order_item", "option"]
    list_select_related = ["order_item", "option"]
