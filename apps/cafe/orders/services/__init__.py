"""Order services - duplicate suppression, pricing, persistence and approval."""

from apps.cafe.orders.services.approval import approve_order
from apps.cafe.orders.services.duplicates import (
    DuplicateSubmissionGuard,
    fingerprint_cart,
)
from apps.cafe.orders.services.persistence import CommittedOrder, commit_order
from apps.cafe.orders.services.placement import (
    OrderService,
    build_order_service,
    get_order_service,
)
from apps.cafe.orders.services.pricing import (
    PriceQuote,
    Reconciliation,
    reconcile,
)

__all__ = [
    "CommittedOrder",
    "DuplicateSubmissionGuard",
    "OrderService",
    "PriceQuote",
    "Reconciliation",
    "approve_order",
    "build_order_service",
    "commit_order",
    "fingerprint_cart",
    "get_order_service",
    "reconcile",
]
