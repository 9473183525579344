"""
Duplicate-submission guard - suppresses replayed order carts.

A fingerprint of the normalized cart plus the client's request id is held
for a short window; a second submission with the same fingerprint inside
the window is rejected. Fingerprints live in the Django cache, so the
guard is shared by every worker using the same cache backend.
"""

import hashlib
import json
import logging

from django.core.cache import caches
from django.core.cache.backends.base import BaseCache

from apps.cafe.orders.serializers import OrderCreateRequest
from apps.cafe.orders.services.pricing import to_money

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 15.0
DEFAULT_CACHE_ALIAS = "default"
KEY_PREFIX = "order-fp"


def fingerprint_cart(cart: OrderCreateRequest, request_id: str) -> str:
    """
    Deterministic SHA-256 fingerprint of a cart.

    Covers menu lines, breakfast lines, table, order type, declared total
    and request id. Prices are normalized to cents so "10" and "10.00"
    hash the same.
    """
    canonical = {
        "items": [
            {
                "item_id": line.item_id,
                "quantity": line.quantity,
                "unit_price": str(to_money(line.unit_price)),
                "supplement_id": line.supplement_id,
            }
            for line in cart.items
        ],
        "breakfast_items": [
            {
                "breakfast_id": line.breakfast_id,
                "quantity": line.quantity,
                "unit_price": str(to_money(line.unit_price)),
                "option_ids": line.option_ids,
            }
            for line in cart.breakfast_items
        ],
        "table_id": cart.table_id,
        "order_type": cart.order_type,
        "total_price": str(to_money(cart.total_price)),
        "request_id": request_id.lower(),
    }
    encoded = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class DuplicateSubmissionGuard:
    """
    Recently seen fingerprints, held in the Django cache.

    Each fingerprint is stored under its own key with the window as timeout,
    so expiry is left to the cache backend. ``cache.add`` only writes when
    the key is absent, which makes check-and-register a single operation on
    backends that support it (locmem, Redis).
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        cache_alias: str = DEFAULT_CACHE_ALIAS,
        key_prefix: str = KEY_PREFIX,
    ) -> None:
        self.window_seconds = window_seconds
        self.cache_alias = cache_alias
        self.key_prefix = key_prefix

    @property
    def cache(self) -> BaseCache:
        return caches[self.cache_alias]

    def _key(self, fingerprint: str) -> str:
        return f"{self.key_prefix}:{fingerprint}"

    def __contains__(self, fingerprint: object) -> bool:
        return self.cache.get(self._key(str(fingerprint))) is not None

    def check_and_register(self, fingerprint: str) -> bool:
        """
        Register a fingerprint unless it is already held.

        Returns:
            True if the submission is accepted, False if it is a duplicate
            seen within the window.
        """
        accepted = self.cache.add(
            self._key(fingerprint), 1, timeout=self.window_seconds
        )
        if not accepted:
            logger.info("Duplicate submission rejected: %s", fingerprint[:12])
        return accepted
