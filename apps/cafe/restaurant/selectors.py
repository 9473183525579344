"""
Catalog read interface used by order placement.

Every lookup reads current catalog state; nothing here is cached, so the
prices an order is validated against are the prices at submission time.
"""

from collections.abc import Iterable
from decimal import Decimal

from apps.cafe.restaurant.models import (
    Breakfast,
    BreakfastOption,
    MenuItem,
    MenuItemSupplement,
    Promotion,
    Table,
)


def get_menu_item(item_id: int) -> MenuItem | None:
    """Get a menu item by id, or None."""
    return MenuItem.objects.filter(pk=item_id).first()


def get_item_supplement(item_id: int, supplement_id: int) -> MenuItemSupplement | None:
    """Get the supplement offer for one item, or None if not offered."""
    return (
        MenuItemSupplement.objects.select_related("supplement")
        .filter(menu_item_id=item_id, supplement_id=supplement_id)
        .first()
    )


def get_breakfast(breakfast_id: int) -> Breakfast | None:
    """Get a breakfast by id, or None."""
    return Breakfast.objects.filter(pk=breakfast_id).first()


def get_option_group_ids(breakfast_id: int) -> set[int]:
    """Ids of every option group defined for a breakfast."""
    return set(
        Breakfast.objects.filter(pk=breakfast_id).values_list(
            "option_groups__id", flat=True
        )
    ) - {None}


def get_breakfast_options(
    breakfast_id: int, option_ids: Iterable[int]
) -> list[BreakfastOption]:
    """Options of this breakfast among ``option_ids`` (foreign ids are dropped)."""
    return list(
        BreakfastOption.objects.filter(breakfast_id=breakfast_id, pk__in=list(option_ids))
    )


def get_promotion(promotion_id: int) -> Promotion | None:
    """Get a promotion by id, or None."""
    return Promotion.objects.filter(pk=promotion_id).first()


def get_table(table_id: int) -> Table | None:
    """Get a table by id, or None."""
    return Table.objects.filter(pk=table_id).first()


def option_price_total(options: Iterable[BreakfastOption]) -> Decimal:
    """Sum of the additional prices of the given options."""
    return sum((option.additional_price for option in options), Decimal("0"))
