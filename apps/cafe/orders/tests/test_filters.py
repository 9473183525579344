"""Tests for order list predicates."""

from datetime import timedelta

from django.utils import timezone

import pytest

from apps.cafe.orders.filters import (
    approval_predicate,
    start_of_day,
    time_range_predicate,
)
from apps.cafe.orders.models import Order

from .factories import OrderFactory


def order_created_at(moment, **kwargs) -> Order:
    order = OrderFactory(**kwargs)
    Order.objects.filter(pk=order.pk).update(created_at=moment)
    return order


def matching(predicate) -> set[int]:
    return set(Order.objects.filter(predicate).values_list("pk", flat=True))


@pytest.fixture
def now():
    """Midday, so 'an hour ago' is still today."""
    return start_of_day(timezone.now()) + timedelta(hours=12)


@pytest.mark.django_db
class TestTimeRangePredicate:
    """Tests for time_range_predicate."""

    def test_hour(self, now):
        recent = order_created_at(now - timedelta(minutes=30))
        order_created_at(now - timedelta(hours=2))

        assert matching(time_range_predicate("hour", now)) == {recent.pk}

    def test_day_starts_at_local_midnight(self, now):
        morning = order_created_at(start_of_day(now) + timedelta(minutes=5))
        order_created_at(start_of_day(now) - timedelta(minutes=5))

        assert matching(time_range_predicate("day", now)) == {morning.pk}

    def test_yesterday_excludes_today(self, now):
        order_created_at(now - timedelta(minutes=1))
        yesterday = order_created_at(now - timedelta(days=1))
        order_created_at(now - timedelta(days=2))

        assert matching(time_range_predicate("yesterday", now)) == {yesterday.pk}

    def test_week_and_month(self, now):
        five_days = order_created_at(now - timedelta(days=5))
        twenty_days = order_created_at(now - timedelta(days=20))
        order_created_at(now - timedelta(days=40))

        assert matching(time_range_predicate("week", now)) == {five_days.pk}
        assert matching(time_range_predicate("month", now)) == {
            five_days.pk,
            twenty_days.pk,
        }

    def test_unknown_range_matches_everything(self, now):
        old = order_created_at(now - timedelta(days=400))

        assert old.pk in matching(time_range_predicate("decade", now))
        assert old.pk in matching(time_range_predicate(None, now))


@pytest.mark.django_db
class TestApprovalPredicate:
    """Tests for approval_predicate."""

    def test_filters_on_flag(self):
        approved = OrderFactory(approved=True)
        pending = OrderFactory(approved=False)

        assert matching(approval_predicate("1")) == {approved.pk}
        assert matching(approval_predicate("0")) == {pending.pk}
        assert matching(approval_predicate(None)) == {approved.pk, pending.pk}
        assert matching(approval_predicate("yes")) == {approved.pk, pending.pk}
