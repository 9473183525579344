"""
URL routing for staff notification endpoints.
"""

from django.urls import path

from apps.cafe.notifications import views

app_name = "notifications"

urlpatterns = [
    path("notifications", views.list_notifications, name="notification_list"),
    path("notifications/clear", views.clear_notifications, name="notification_clear"),
    path(
        "notifications/<int:notification_id>/read",
        views.mark_notification_read,
        name="notification_read",
    ),
]
