"""
Composable query predicates for the staff order list.

Day boundaries are local midnight in the configured TIME_ZONE.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from django.db.models import Q
from django.utils import timezone


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of the day containing ``moment``."""
    return timezone.localtime(moment).replace(hour=0, minute=0, second=0, microsecond=0)


def _last_hour(now: datetime) -> Q:
    return Q(created_at__gte=now - timedelta(hours=1))


def _today(now: datetime) -> Q:
    return Q(created_at__gte=start_of_day(now))


def _yesterday(now: datetime) -> Q:
    midnight = start_of_day(now)
    return Q(created_at__gte=midnight - timedelta(days=1), created_at__lt=midnight)


def _last_week(now: datetime) -> Q:
    return Q(created_at__gte=start_of_day(now) - timedelta(days=7))


def _last_month(now: datetime) -> Q:
    return Q(created_at__gte=start_of_day(now) - timedelta(days=30))


TIME_RANGES: dict[str, Callable[[datetime], Q]] = {
    "hour": _last_hour,
    "day": _today,
    "yesterday": _yesterday,
    "week": _last_week,
    "month": _last_month,
}


def time_range_predicate(time_range: str | None, now: datetime | None = None) -> Q:
    """Predicate for a named time range; unknown or missing names match all."""
    builder = TIME_RANGES.get(time_range or "")
    if builder is None:
        return Q()
    return builder(now or timezone.now())


def approval_predicate(approved: str | None) -> Q:
    """Predicate for the ``approved`` query flag ("1" or "0"); else match all."""
    if approved == "1":
        return Q(approved=True)
    if approved == "0":
        return Q(approved=False)
    return Q()
