"""Admin registration for restaurant catalog models."""

from django.contrib import admin

from apps.cafe.restaurant.models import (
    Breakfast,
    BreakfastOption,
    BreakfastOptionGroup,
    Category,
    MenuItem,
    MenuItemSupplement,
    Promotion,
    Supplement,
    Table,
)


class MenuItemInline(admin.TabularInline):
    """Inline for items within a category."""

    model = MenuItem
    extra = 0
    fields = ["name", "regular_price", "sale_price", "availability"]


class MenuItemSupplementInline(admin.TabularInline):
    """Inline for supplements offered on an item."""

    model = MenuItemSupplement
    extra = 0
    fields = ["supplement", "additional_price"]


class BreakfastOptionGroupInline(admin.TabularInline):
    """Inline for option groups within a breakfast."""

    model = BreakfastOptionGroup
    extra = 0
    fields = ["title"]


class BreakfastOptionInline(admin.TabularInline):
    """Inline for options within a group."""

    model = BreakfastOption
    extra = 0
    fields = ["breakfast", "option_name", "additional_price"]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin for categories."""

    list_display = ["name", "created_at"]
    search_fields = ["name"]
    inlines = [MenuItemInline]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "regular_price", "sale_price", "availability"]
    list_filter = ["availability", "category"]
    search_fields = ["name", "description"]
    inlines = [MenuItemSupplementInline]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["category", "name", "description"]}),
        ("Pricing", {"fields": ["regular_price", "sale_price"]}),
        ("Media", {"fields": ["image_url"]}),
        ("Availability", {"fields": ["availability"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(Supplement)
class SupplementAdmin(admin.ModelAdmin):
    """Admin for supplements."""

    list_display = ["name"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Breakfast)
class BreakfastAdmin(admin.ModelAdmin):
    """Admin for breakfasts."""

    list_display = ["name", "category", "price", "availability"]
    list_filter = ["availability"]
    search_fields = ["name"]
    inlines = [BreakfastOptionGroupInline]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(BreakfastOptionGroup)
class BreakfastOptionGroupAdmin(admin.ModelAdmin):
    """Admin for breakfast option groups."""

    list_display = ["title", "breakfast"]
    search_fields = ["title", "breakfast__name"]
    inlines = [BreakfastOptionInline]


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    """Admin for promotions."""

    list_display = [
        "title",
        "discount_percentage",
        "item",
        "start_date",
        "end_date",
        "active",
    ]
    list_filter = ["active"]
    search_fields = ["title"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    """Admin for tables."""

    list_display = ["table_number", "capacity", "status"]
    list_filter = ["status"]
    readonly_fields = ["created_at", "updated_at"]
