"""
Caller identity and role checks.

Views resolve an Actor once per request and hand it to the services, so
order logic never reads identity from the request object itself.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from django.http import HttpRequest

STAFF_ROLES = ("admin", "server")


def has_role(user_id: int | None, roles: Iterable[str]) -> bool:
    """
    Check the user store for an active user holding one of ``roles``.

    Args:
        user_id: Primary key of the user (None for anonymous callers).
        roles: Accepted role names.

    Returns:
        True if the user exists, is active, and has one of the roles.
    """
    from apps.cafe.core.models import User  # noqa: PLC0415

    if not user_id:
        return False
    return User.objects.filter(pk=user_id, is_active=True, role__in=list(roles)).exists()


@dataclass(frozen=True)
class Actor:
    """The resolved caller of a request."""

    user_id: int | None
    role: str | None
    session_id: str

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_staff(self) -> bool:
        """Staff capability, re-checked against the user store."""
        return has_role(self.user_id, STAFF_ROLES)

    @classmethod
    def from_request(cls, request: "HttpRequest") -> "Actor":
        """Build an Actor from the authenticated user and session id."""
        user = getattr(request, "user", None)
        session_id = getattr(request, "session_id", "") or ""
        if user is not None and user.is_authenticated:
            return cls(user_id=user.pk, role=user.role, session_id=session_id)
        return cls(user_id=None, role=None, session_id=session_id)
