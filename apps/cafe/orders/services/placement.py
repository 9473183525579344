"""
Order service - the order placement pipeline and approval entry point.

Handles:
1. Duplicate-submission suppression
2. Order type, table and address checks
3. Price reconciliation against the live catalog
4. Atomic persistence with post-commit fan-out
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Any

from django.apps import apps as django_apps
from django.conf import settings
from django.utils import timezone

from apps.cafe.core.permissions import Actor
from apps.cafe.orders.exceptions import (
    DuplicateSubmission,
    OrderNotFound,
    OrderValidationError,
)
from apps.cafe.orders.models import OrderType
from apps.cafe.orders.serializers import UUID_PATTERN, OrderCreateRequest
from apps.cafe.orders.services.approval import approve_order
from apps.cafe.orders.services.duplicates import (
    DuplicateSubmissionGuard,
    fingerprint_cart,
)
from apps.cafe.orders.services.persistence import CommittedOrder, commit_order
from apps.cafe.orders.services.pricing import reconcile
from apps.cafe.realtime.publisher import Publisher, get_publisher
from apps.cafe.restaurant import selectors
from apps.cafe.restaurant.models import TableStatus

logger = logging.getLogger(__name__)

_REQUEST_ID_RE = re.compile(UUID_PATTERN)


def validate_cart(cart: OrderCreateRequest) -> None:
    """
    Structural checks that need no catalog lookups.

    Raises:
        OrderValidationError: Naming the offending field.
    """
    if cart.order_type not in OrderType.values:
        raise OrderValidationError("Invalid order type", field="order_type")
    if not cart.items and not cart.breakfast_items:
        raise OrderValidationError(
            "Items or breakfast items array is required and non-empty",
            field="items",
        )
    if cart.order_type == OrderType.LOCAL and cart.table_id is None:
        raise OrderValidationError(
            "Table ID required for local orders", field="table_id"
        )
    if cart.order_type == OrderType.DELIVERY and not (
        cart.delivery_address and cart.delivery_address.strip()
    ):
        raise OrderValidationError(
            "Delivery address required", field="delivery_address"
        )


def check_table(table_id: int) -> None:
    """
    The table a local order is for must exist and not be reserved.

    Raises:
        OrderNotFound: No such table.
        OrderValidationError: Table is reserved.
    """
    table = selectors.get_table(table_id)
    if table is None:
        logger.warning("Invalid table: table_id=%s", table_id)
        raise OrderNotFound("Table does not exist")
    if table.status == TableStatus.RESERVED:
        logger.warning("Table reserved: table_id=%s", table_id)
        raise OrderValidationError("Table is reserved", field="table_id")


class OrderService:
    """
    Order placement and approval.

    Owns the duplicate-submission guard; the publisher and clock are
    injectable so tests can observe events and control time.
    """

    def __init__(
        self,
        guard: DuplicateSubmissionGuard | None = None,
        publisher: Publisher | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.guard = guard if guard is not None else DuplicateSubmissionGuard()
        self._publisher = publisher
        self.clock = clock

    @property
    def publisher(self) -> Publisher:
        return self._publisher if self._publisher is not None else get_publisher()

    def place_order(
        self, actor: Actor, cart: OrderCreateRequest, request_id: str
    ) -> CommittedOrder:
        """
        Run the placement pipeline for one cart.

        Args:
            actor: The caller; its session id tags the order.
            cart: Schema-validated request body.
            request_id: Client idempotency token (UUID format).

        Returns:
            CommittedOrder once the transaction has committed.

        Raises:
            OrderValidationError: Malformed request id or cart shape.
            DuplicateSubmission: Same cart seen within the guard window.
            OrderNotFound: Unknown table.
            CatalogViolation: Unusable catalog reference.
            PriceMismatch: Declared prices disagree with the catalog.
            PersistenceError: The transaction failed and was rolled back.
        """
        if not _REQUEST_ID_RE.match(request_id or ""):
            raise OrderValidationError(
                "request_id must be a valid UUID", field="request_id"
            )

        fingerprint = fingerprint_cart(cart, request_id)
        if not self.guard.check_and_register(fingerprint):
            logger.warning(
                "Duplicate order submission (request_id=%s, session=%s)",
                request_id,
                actor.session_id,
            )
            raise DuplicateSubmission(
                "Duplicate order submission detected. Please wait and try again."
            )

        validate_cart(cart)
        if cart.order_type == OrderType.LOCAL and cart.table_id is not None:
            check_table(cart.table_id)

        reconciliation = reconcile(cart, self.clock())
        return commit_order(
            reconciliation,
            cart,
            session_id=actor.session_id,
            publisher=self.publisher,
        )

    def approve(self, actor: Actor, order_id: int) -> dict[str, Any]:
        """Approve an order; see approval.approve_order."""
        return approve_order(actor, order_id, self.publisher)


def build_order_service() -> OrderService:
    """Create the order service configured in settings."""
    guard = DuplicateSubmissionGuard(
        window_seconds=settings.ORDER_DUPLICATE_WINDOW_SECONDS,
        cache_alias=settings.ORDER_DUPLICATE_CACHE,
    )
    return OrderService(guard=guard)


def get_order_service() -> OrderService:
    """Return the process-wide order service owned by the orders app."""
    return django_apps.get_app_config("orders").order_service  # type: ignore[attr-defined]
