"""
URL configuration for the cafe ordering backend.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # Public and staff API endpoints
    path("api/", include("apps.cafe.orders.urls")),
    path("api/", include("apps.cafe.notifications.urls")),
]
