"""Django app configuration for orders module."""

from typing import TYPE_CHECKING

from django.apps import AppConfig

if TYPE_CHECKING:
    from apps.cafe.orders.services import OrderService


class OrdersConfig(AppConfig):
    """Orders app configuration - owns the order service."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.cafe.orders"
    label = "orders"
    verbose_name = "Orders"

    order_service: "OrderService"

    def ready(self) -> None:
        from apps.cafe.orders.services import build_order_service  # noqa: PLC0415

        self.order_service = build_order_service()
