"""
Order persistence - writes a reconciled order in one transaction.

Header, lines, breakfast option selections, the staff notification and the
table status change commit together or not at all. Realtime fan-out is
registered with transaction.on_commit so it only fires after commit.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any

from django.db import DatabaseError, transaction

from apps.cafe.notifications.models import Notification, NotificationType
from apps.cafe.orders.exceptions import (
    OrderNotFound,
    OrderValidationError,
    PersistenceError,
)
from apps.cafe.orders.models import BreakfastOrderOption, Order, OrderItem, OrderType
from apps.cafe.orders.selectors import get_order_detail
from apps.cafe.orders.serializers import OrderCreateRequest
from apps.cafe.orders.services.events import publish_order_created
from apps.cafe.orders.services.pricing import Reconciliation
from apps.cafe.realtime.publisher import Publisher
from apps.cafe.restaurant.models import Table, TableStatus

logger = logging.getLogger(__name__)


@dataclass
class CommittedOrder:
    """A persisted order and what was written alongside it."""

    order: Order
    detail: dict[str, Any]
    notification: Notification
    table_occupied: bool = False


def notification_message(order: Order, table: Table | None) -> str:
    """Staff notification text for a new order."""
    if order.order_type == OrderType.LOCAL:
        table_number = table.table_number if table else "N/A"
        return f"New order #{order.pk} for Table {table_number}"
    return f"New delivery order #{order.pk} for {order.delivery_address}"


def _occupy_table(table_id: int) -> tuple[Table, bool]:
    """
    Lock the table row and mark it occupied.

    Returns:
        Tuple of (table, changed) where changed is False if it was
        already occupied.
    """
    table = Table.objects.select_for_update().filter(pk=table_id).first()
    if table is None:
        raise OrderNotFound("Table does not exist")
    if table.status == TableStatus.RESERVED:
        raise OrderValidationError("Table is reserved", field="table_id")
    if table.status == TableStatus.OCCUPIED:
        return table, False

    table.status = TableStatus.OCCUPIED
    table.save(update_fields=["status", "updated_at"])
    return table, True


def _write_lines(order: Order, reconciliation: Reconciliation) -> None:
    for line in reconciliation.menu_lines:
        OrderItem.objects.create(
            order=order,
            menu_item=line.menu_item,
            quantity=line.quantity,
            unit_price=line.quote.unit_price,
            supplement=line.supplement,
            supplement_price=line.supplement_price,
        )

    for line in reconciliation.breakfast_lines:
        order_item = OrderItem.objects.create(
            order=order,
            breakfast=line.breakfast,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )
        BreakfastOrderOption.objects.bulk_create(
            [
                BreakfastOrderOption(order_item=order_item, option=option)
                for option in line.options
            ]
        )


def commit_order(
    reconciliation: Reconciliation,
    cart: OrderCreateRequest,
    session_id: str,
    publisher: Publisher,
) -> CommittedOrder:
    """
    Persist a reconciled order atomically and schedule its fan-out.

    Args:
        reconciliation: Validated lines and authoritative total.
        cart: The validated request (order type, address, table).
        session_id: Originating client session.
        publisher: Realtime publisher used after commit.

    Returns:
        CommittedOrder with the denormalized detail read inside the
        transaction.

    Raises:
        OrderNotFound: The table disappeared before it could be locked.
        OrderValidationError: The table was reserved in the meantime.
        PersistenceError: Any database failure; everything is rolled back.
    """
    is_local = cart.order_type == OrderType.LOCAL

    try:
        with transaction.atomic():
            table = None
            table_changed = False
            if is_local and cart.table_id is not None:
                table, table_changed = _occupy_table(cart.table_id)

            order = Order.objects.create(
                total_price=reconciliation.total,
                order_type=cart.order_type,
                delivery_address=None if is_local else cart.delivery_address,
                table=table,
                promotion=reconciliation.promotion,
                session_id=session_id,
            )
            _write_lines(order, reconciliation)

            notification = Notification.objects.create(
                type=NotificationType.ORDER,
                reference_id=order.pk,
                message=notification_message(order, table),
            )

            detail = get_order_detail(order.pk)
            if detail is None:
                raise DatabaseError(f"Order {order.pk} not readable after insert")

            table_update = None
            if table_changed and table is not None:
                table_update = {"id": table.pk, "status": TableStatus.OCCUPIED.value}

            transaction.on_commit(
                partial(
                    publish_order_created,
                    publisher,
                    detail,
                    session_id,
                    notification.as_event(),
                    table_update,
                )
            )
    except DatabaseError as e:
        logger.exception(
            "Order transaction rolled back (table=%s, session=%s)",
            cart.table_id,
            session_id,
        )
        raise PersistenceError("Failed to create order") from e

    logger.info(
        "Order %s created: total=%s lines=%d breakfasts=%d notification=%s",
        order.pk,
        order.total_price,
        len(reconciliation.menu_lines),
        len(reconciliation.breakfast_lines),
        notification.pk,
    )
    return CommittedOrder(
        order=order,
        detail=detail,
        notification=notification,
        table_occupied=table_changed,
    )
