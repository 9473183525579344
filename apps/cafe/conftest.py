"""
Pytest configuration for Django app tests.
"""

import time
from collections.abc import Iterator
from typing import Any
from unittest.mock import patch

from django.apps import apps as django_apps
from django.core.cache import cache
from django.test import Client as DjangoClient

import pytest

from apps.cafe.core.models import User
from apps.cafe.core.tests.factories import UserFactory
from apps.cafe.orders.services import DuplicateSubmissionGuard, OrderService


class RecordingPublisher:
    """Publisher that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any], str]] = []

    def publish(self, event: str, payload: dict[str, Any], channel: str) -> None:
        self.events.append((event, payload, channel))

    def named(self, event: str) -> list[tuple[str, dict[str, Any], str]]:
        return [e for e in self.events if e[0] == event]


class FakeClock:
    """Wall clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> Iterator[FakeClock]:
    """Freeze the clock the cache backend expires keys with."""
    clock = FakeClock(start=time.time())
    with patch("django.core.cache.backends.locmem.time.time", clock):
        yield clock


@pytest.fixture(autouse=True)
def clear_cache() -> Iterator[None]:
    """Duplicate fingerprints must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def publisher() -> Iterator[RecordingPublisher]:
    """Swap the realtime publisher for a recording one."""
    config = django_apps.get_app_config("realtime")
    original = config.publisher
    recording = RecordingPublisher()
    config.publisher = recording
    yield recording
    config.publisher = original


@pytest.fixture(autouse=True)
def order_service(publisher: RecordingPublisher) -> Iterator[OrderService]:
    """Fresh order service per test, publishing to the recording publisher."""
    config = django_apps.get_app_config("orders")
    original = config.order_service
    service = OrderService(
        guard=DuplicateSubmissionGuard(window_seconds=15.0),
        publisher=publisher,
    )
    config.order_service = service
    yield service
    config.order_service = original


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def staff_user(db) -> User:
    """An active server."""
    return UserFactory(role=User.Role.SERVER)


@pytest.fixture
def customer_user(db) -> User:
    """A logged-in customer (not staff)."""
    return UserFactory(role=User.Role.CUSTOMER)


@pytest.fixture
def staff_client(staff_user: User) -> DjangoClient:
    """Test client logged in as staff."""
    client = DjangoClient()
    client.force_login(staff_user)
    return client
