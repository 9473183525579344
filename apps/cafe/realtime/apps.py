"""Django app configuration for realtime module."""

from typing import TYPE_CHECKING

from django.apps import AppConfig

if TYPE_CHECKING:
    from apps.cafe.realtime.publisher import Publisher


class RealtimeConfig(AppConfig):
    """Realtime app configuration - owns the event publisher."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.cafe.realtime"
    label = "realtime"
    verbose_name = "Realtime"

    publisher: "Publisher"

    def ready(self) -> None:
        from apps.cafe.realtime.publisher import build_publisher  # noqa: PLC0415

        self.publisher = build_publisher()
