"""
Order API views - order placement for the ordering client, review and
approval for staff.

Errors are returned as {"error": message}; request-shape errors as
{"error": "validation_error", "details": [...]}.
"""

import json
import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from pydantic import ValidationError as PydanticValidationError

from apps.cafe.core.decorators import staff_required
from apps.cafe.core.http import json_response
from apps.cafe.core.permissions import Actor
from apps.cafe.orders.exceptions import OrderError
from apps.cafe.orders.filters import approval_predicate, time_range_predicate
from apps.cafe.orders.selectors import get_order_detail, list_order_details
from apps.cafe.orders.serializers import (
    OrderCreateRequest,
    OrderCreateResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from apps.cafe.orders.services import get_order_service

logger = logging.getLogger(__name__)


def _error_response(error: OrderError) -> JsonResponse:
    """Map an order exception to its JSON response."""
    return json_response({"error": error.message}, status=error.status_code)


def _create_order(request: HttpRequest) -> JsonResponse:
    """
    POST /api/orders

    Request body: OrderCreateRequest schema
    Response: {"message": "Order created", "orderId": id} (201)
    """
    actor = Actor.from_request(request)

    try:
        data = json.loads(request.body)
        cart = OrderCreateRequest.model_validate(data)
    except json.JSONDecodeError:
        return json_response({"error": "Invalid JSON in request body"}, status=400)
    except PydanticValidationError as e:
        errors = [
            ValidationErrorDetail(
                field=".".join(str(loc) for loc in err["loc"]),
                message=err["msg"],
            )
            for err in e.errors()
        ]
        logger.warning("Invalid order request (session=%s)", actor.session_id)
        response = ValidationErrorResponse(error="validation_error", details=errors)
        return json_response(response.model_dump(), status=400)

    try:
        committed = get_order_service().place_order(actor, cart, cart.request_id)
    except OrderError as e:
        return _error_response(e)

    body = OrderCreateResponse(order_id=committed.order.pk)
    return json_response(body.model_dump(by_alias=True), status=201)


@staff_required
def _list_orders(request: HttpRequest) -> JsonResponse:
    """
    GET /api/orders?time_range=hour|day|yesterday|week|month&approved=0|1

    Returns denormalized orders, newest first.
    """
    time_range = request.GET.get("time_range")
    approved = request.GET.get("approved")
    orders = list_order_details(
        time_range_predicate(time_range),
        approval_predicate(approved),
    )
    logger.info(
        "Fetched %d orders (time_range=%s, approved=%s, user=%s)",
        len(orders),
        time_range,
        approved,
        request.user.pk,
    )
    return json_response(orders)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def orders_collection(request: HttpRequest) -> JsonResponse:
    """GET lists orders (staff only); POST places an order."""
    if request.method == "POST":
        return _create_order(request)
    return _list_orders(request)


@staff_required
def _reject_order_update(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    PUT /api/orders/{order_id}

    Orders carry no editable status; the only transition is approval.
    """
    logger.warning("Rejected status update for order %s (user=%s)", order_id, request.user.pk)
    return json_response(
        {"error": "Order status updates are not supported"},
        status=400,
    )


@csrf_exempt
@require_http_methods(["GET", "PUT"])
def order_detail(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    GET /api/orders/{order_id}

    Returns one denormalized order.
    """
    if request.method == "PUT":
        return _reject_order_update(request, order_id)

    detail = get_order_detail(order_id)
    if detail is None:
        return json_response({"error": "Order not found"}, status=404)
    return json_response(detail)


@csrf_exempt
@require_POST
def approve_order(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    POST /api/orders/{order_id}/approve

    Staff only. Approval is one-way; a second approval is rejected.
    """
    actor = Actor.from_request(request)
    try:
        get_order_service().approve(actor, order_id)
    except OrderError as e:
        return _error_response(e)
    return json_response({"message": "Order approved"})


@require_GET
def session_info(request: HttpRequest) -> JsonResponse:
    """
    GET /api/session

    Returns the session id the client should join its realtime channel with.
    """
    return json_response({"sessionId": getattr(request, "session_id", "")})
