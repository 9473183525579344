"""
Notification API views - staff activity feed.

All endpoints require an admin or server session.
"""

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from apps.cafe.core.decorators import staff_required
from apps.cafe.core.http import json_response
from apps.cafe.notifications.models import Notification, NotificationType
from apps.cafe.realtime.publisher import get_publisher, safe_publish, user_channel

logger = logging.getLogger(__name__)


@require_GET
@staff_required
def list_notifications(request: HttpRequest) -> JsonResponse:
    """
    GET /api/notifications?is_read=0|1

    Returns order notifications, newest first.
    """
    is_read = request.GET.get("is_read")
    if is_read is not None and is_read not in ("0", "1"):
        return json_response(
            {
                "error": "validation_error",
                "details": [
                    {"field": "is_read", "message": "is_read must be 0 or 1"}
                ],
            },
            status=400,
        )

    notifications = Notification.objects.filter(type=NotificationType.ORDER)
    if is_read is not None:
        notifications = notifications.filter(is_read=is_read == "1")

    data = [n.as_event() for n in notifications]
    logger.info("Fetched %d notifications (user=%s)", len(data), request.user.pk)
    return json_response(data)


@csrf_exempt
@require_http_methods(["PUT"])
@staff_required
def mark_notification_read(request: HttpRequest, notification_id: int) -> JsonResponse:
    """
    PUT /api/notifications/{notification_id}/read

    Marks one notification read and pushes the update to the caller's screens.
    """
    notification = Notification.objects.filter(pk=notification_id).first()
    if notification is None:
        return json_response({"error": "Notification not found"}, status=404)

    notification.is_read = True
    notification.save(update_fields=["is_read"])

    safe_publish(
        get_publisher(),
        "notification-updated",
        notification.as_event(),
        user_channel(request.user.pk),
    )
    logger.info("Notification %s marked read (user=%s)", notification_id, request.user.pk)
    return json_response({"message": "Notification marked as read"})


@csrf_exempt
@require_http_methods(["PUT"])
@staff_required
def clear_notifications(request: HttpRequest) -> JsonResponse:
    """
    PUT /api/notifications/clear

    Marks every unread order notification read.
    """
    cleared = Notification.objects.filter(
        type=NotificationType.ORDER, is_read=False
    ).update(is_read=True)

    safe_publish(
        get_publisher(),
        "notifications-cleared",
        {"type": NotificationType.ORDER.value},
        user_channel(request.user.pk),
    )
    logger.info("Cleared %d notifications (user=%s)", cleared, request.user.pk)
    return json_response({"message": "Notifications cleared"})
