"""
Order event fan-out.

Called from transaction.on_commit hooks, so nothing is published for a
rolled-back order. Publish failures are logged and never reach the caller.
"""

import logging
from typing import Any

from apps.cafe.realtime.publisher import (
    BROADCAST,
    STAFF_NOTIFICATIONS,
    Publisher,
    safe_publish,
    session_channel,
)

logger = logging.getLogger(__name__)


def publish_order_created(
    publisher: Publisher,
    detail: dict[str, Any],
    session_id: str,
    notification: dict[str, Any],
    table_update: dict[str, Any] | None = None,
) -> None:
    """Push a new order to staff screens and back to the ordering session."""
    safe_publish(publisher, "newOrder", detail, BROADCAST)
    if session_id:
        safe_publish(publisher, "order-created", detail, session_channel(session_id))
    if table_update is not None:
        safe_publish(publisher, "tableStatusUpdate", table_update, BROADCAST)
    safe_publish(publisher, "newNotification", notification, STAFF_NOTIFICATIONS)
    logger.info("Order %s fanned out (session=%s)", detail["id"], session_id)


def publish_order_approved(
    publisher: Publisher,
    detail: dict[str, Any],
    session_id: str,
) -> None:
    """Tell the ordering session and every staff screen an order was approved."""
    payload = {"orderId": detail["id"], "orderDetails": detail}
    if session_id:
        safe_publish(publisher, "order-approved", payload, session_channel(session_id))
    safe_publish(publisher, "orderApproved", payload, BROADCAST)
    logger.info("Order %s approval fanned out (session=%s)", detail["id"], session_id)
