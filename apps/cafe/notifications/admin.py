"""Admin registration for notifications."""

from django.contrib import admin

from apps.cafe.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin for notifications."""

    list_display = ["message", "type", "reference_id", "is_read", "created_at"]
    list_filter = ["type", "is_read"]
    search_fields = ["message"]
    readonly_fields = ["created_at"]
