"""
URL configuration for the order API.

Mounted under /api/ in the root URLconf.
"""

from django.urls import path

from apps.cafe.orders import views

app_name = "orders"

urlpatterns = [
    path("session", views.session_info, name="session"),
    path("orders", views.orders_collection, name="orders"),
    path("orders/<int:order_id>", views.order_detail, name="order_detail"),
    path(
        "orders/<int:order_id>/approve",
        views.approve_order,
        name="approve_order",
    ),
]
