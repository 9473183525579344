"""
JSON response helpers shared by the API views.
"""

from typing import Any

from django.http import JsonResponse


def cors_headers() -> dict[str, str]:
    """CORS headers for the admin panel and ordering client."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, PUT, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, X-Session-ID",
    }


def json_response(data: dict[str, Any] | list[Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status, safe=isinstance(data, dict))
    for key, value in cors_headers().items():
        response[key] = value
    return response
