"""
Decorators for request handling and authorization.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.http import HttpRequest

from apps.cafe.core.http import json_response
from apps.cafe.core.permissions import STAFF_ROLES, Actor, has_role

logger = logging.getLogger(__name__)


def staff_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that restricts a view to admin and server users.

    Anonymous callers and non-staff users get a 403 JSON error instead of
    the login redirect Django's own decorators would issue.

    Usage:
        @staff_required
        def list_orders(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        actor = Actor.from_request(request)
        if not has_role(actor.user_id, STAFF_ROLES):
            logger.warning(
                "Unauthorized staff request to %s (user=%s, session=%s)",
                request.path,
                actor.user_id,
                actor.session_id,
            )
            return json_response(
                {"error": "Admin or server access required"},
                status=403,
            )
        return view_func(request, *args, **kwargs)

    return wrapper
