"""
Order read interface - denormalized order records for staff and clients.
"""

from typing import Any

from django.db.models import Prefetch, Q, QuerySet

from apps.cafe.orders.models import BreakfastOrderOption, Order, OrderItem
from apps.cafe.orders.serializers import (
    BreakfastLineDetailSchema,
    BreakfastOptionDetailSchema,
    MenuLineDetailSchema,
    OrderDetailSchema,
)


def _order_queryset() -> QuerySet[Order]:
    """Orders with table, lines and option selections preloaded."""
    lines = OrderItem.objects.select_related(
        "menu_item", "breakfast", "supplement"
    ).prefetch_related(
        Prefetch(
            "selected_options",
            queryset=BreakfastOrderOption.objects.select_related("option"),
        )
    )
    return Order.objects.select_related("table").prefetch_related(
        Prefetch("items", queryset=lines)
    )


def _serialize_menu_line(line: OrderItem) -> MenuLineDetailSchema:
    return MenuLineDetailSchema(
        id=line.pk,
        item_id=line.menu_item_id,
        name=line.menu_item.name,
        image_url=line.menu_item.image_url,
        quantity=line.quantity,
        unit_price=line.unit_price,
        supplement_id=line.supplement_id,
        supplement_name=line.supplement.name if line.supplement else None,
        supplement_price=line.supplement_price,
    )


def _serialize_breakfast_line(line: OrderItem) -> BreakfastLineDetailSchema:
    options = [
        BreakfastOptionDetailSchema(
            id=selection.option.pk,
            group_id=selection.option.group_id,
            option_name=selection.option.option_name,
            additional_price=selection.option.additional_price,
        )
        for selection in line.selected_options.all()
    ]
    return BreakfastLineDetailSchema(
        id=line.pk,
        breakfast_id=line.breakfast_id,
        name=line.breakfast.name,
        image_url=line.breakfast.image_url,
        quantity=line.quantity,
        unit_price=line.unit_price,
        options=options,
    )


def serialize_order(order: Order) -> OrderDetailSchema:
    """Build the denormalized record for an order loaded via _order_queryset."""
    lines = list(order.items.all())
    return OrderDetailSchema(
        id=order.pk,
        total_price=order.total_price,
        order_type=order.order_type,
        delivery_address=order.delivery_address,
        table_id=order.table_id,
        table_number=order.table.table_number if order.table else None,
        promotion_id=order.promotion_id,
        session_id=order.session_id,
        approved=order.approved,
        created_at=order.created_at,
        items=[_serialize_menu_line(line) for line in lines if not line.is_breakfast],
        breakfast_items=[
            _serialize_breakfast_line(line) for line in lines if line.is_breakfast
        ],
    )


def get_order_detail(order_id: int) -> dict[str, Any] | None:
    """JSON-ready record for one order, or None if it does not exist."""
    order = _order_queryset().filter(pk=order_id).first()
    if order is None:
        return None
    return serialize_order(order).model_dump(mode="json")


def list_order_details(*predicates: Q) -> list[dict[str, Any]]:
    """JSON-ready records for every order matching all predicates, newest first."""
    orders = _order_queryset().filter(*predicates).order_by("-created_at", "-pk")
    return [serialize_order(order).model_dump(mode="json") for order in orders]
