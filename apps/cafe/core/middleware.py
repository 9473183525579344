"""
Session identity middleware - attaches the client session id to request.
"""

from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

SESSION_HEADER = "X-Session-ID"


class SessionIdentityMiddleware:
    """
    Middleware that attaches the ordering client's session id.

    Session id is determined by (in order):
    1. X-Session-ID header (realtime clients that already joined a room)
    2. Django session key (created on first use)

    Sets request.session_id. Must run after SessionMiddleware.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        # Skip for admin
        if request.path.startswith("/admin/"):
            return self.get_response(request)

        request.session_id = self._get_session_id(request)  # type: ignore[attr-defined]
        return self.get_response(request)

    def _get_session_id(self, request: HttpRequest) -> str:
        """Resolve session id from request."""
        header = request.headers.get(SESSION_HEADER, "").strip()
        if header:
            return header

        session = request.session
        if session.session_key is None:
            session.save()
        return session.session_key or ""
