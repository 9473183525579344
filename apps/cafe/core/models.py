"""
Core models - users and shared model bases.

Staff (admins and servers) log in through the Django session; customers
order anonymously and are identified by their session id only.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with a role.

    Only admin and server roles may see or approve orders.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        SERVER = "server", "Server"
        CUSTOMER = "customer", "Customer"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CUSTOMER,
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class TimeStampedModel(models.Model):
    """
    Abstract base with created/updated timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
