"""
Notification models - staff-facing activity feed.
"""

from django.conf import settings
from django.db import models


class NotificationType(models.TextChoices):
    """What a notification refers to."""

    ORDER = "order", "Order"
    RESERVATION = "reservation", "Reservation"


class Notification(models.Model):
    """
    Staff notification about a new order or reservation.

    reference_id points at the order/reservation; user scopes the
    notification to one staff member (null = every staff member).
    """

    type = models.CharField(max_length=20, choices=NotificationType.choices)
    reference_id = models.PositiveBigIntegerField()
    message = models.CharField(max_length=500)
    is_read = models.BooleanField(default=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["type", "is_read"]),
        ]

    def __str__(self) -> str:
        return self.message

    def as_event(self) -> dict[str, object]:
        """Payload pushed to staff screens."""
        return {
            "id": self.pk,
            "type": self.type,
            "reference_id": self.reference_id,
            "message": self.message,
            "is_read": int(self.is_read),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
