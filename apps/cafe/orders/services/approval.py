"""Staff approval of orders - a one-way transition."""

import logging
from functools import partial
from typing import Any

from django.db import transaction

from apps.cafe.core.permissions import Actor
from apps.cafe.orders.exceptions import (
    AlreadyApproved,
    AuthorizationError,
    OrderNotFound,
)
from apps.cafe.orders.models import Order
from apps.cafe.orders.selectors import get_order_detail
from apps.cafe.orders.services.events import publish_order_approved
from apps.cafe.realtime.publisher import Publisher

logger = logging.getLogger(__name__)


def approve_order(actor: Actor, order_id: int, publisher: Publisher) -> dict[str, Any]:
    """
    Approve an order and notify its session and staff screens.

    The flag is flipped with a conditional update, so of two concurrent
    approvals exactly one succeeds.

    Returns:
        The denormalized order detail after approval.

    Raises:
        AuthorizationError: Caller is not admin or server.
        OrderNotFound: No such order.
        AlreadyApproved: The order was already approved.
    """
    if not actor.is_staff:
        logger.warning("Unauthorized approval of order %s (user=%s)", order_id, actor.user_id)
        raise AuthorizationError("Admin or server access required")

    order = Order.objects.filter(pk=order_id).only("pk", "session_id", "approved").first()
    if order is None:
        raise OrderNotFound("Order not found")
    if order.approved:
        logger.warning("Order %s already approved", order_id)
        raise AlreadyApproved("Order already approved")

    with transaction.atomic():
        updated = Order.objects.filter(pk=order_id, approved=False).update(approved=True)
        if not updated:
            logger.warning("Order %s approved concurrently", order_id)
            raise AlreadyApproved("Order already approved")

        detail = get_order_detail(order_id)
        if detail is None:
            raise OrderNotFound("Order not found")
        transaction.on_commit(
            partial(publish_order_approved, publisher, detail, order.session_id)
        )

    logger.info("Order %s approved (user=%s)", order_id, actor.user_id)
    return detail
