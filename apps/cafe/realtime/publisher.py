"""
Realtime event publishing - Redis pub/sub fan-out.

Handles:
1. Channel naming for session, staff, user and broadcast audiences
2. Publishing JSON events to Redis for the socket gateway to relay
3. Logging-only fallback when no Redis URL is configured

Delivery is at-most-once: when nobody is subscribed the event is lost, and
clients re-fetch authoritative state on reconnect.
"""

import json
import logging
import time
from typing import Any, Protocol

from django.apps import apps as django_apps
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

import redis

logger = logging.getLogger(__name__)

BROADCAST = "broadcast"
STAFF_NOTIFICATIONS = "staff-notifications"


def session_channel(session_id: str) -> str:
    """Channel joined by one ordering client session."""
    return f"session:{session_id}"


def user_channel(user_id: int) -> str:
    """Channel joined by one logged-in staff user."""
    return f"user-{user_id}"


class Publisher(Protocol):
    """Anything that can push an event to a channel."""

    def publish(self, event: str, payload: dict[str, Any], channel: str) -> None: ...


def encode_event(event: str, payload: dict[str, Any], channel: str) -> str:
    """Serialize an event envelope to JSON."""
    return json.dumps(
        {
            "event": event,
            "channel": channel,
            "ts_ms": int(time.time() * 1000),
            "payload": payload,
        },
        cls=DjangoJSONEncoder,
    )


class RedisPublisher:
    """
    Publishes events to Redis pub/sub.

    Each audience channel maps to a Redis channel ``{prefix}:{channel}``; the
    socket gateway subscribes with a pattern and relays to its rooms.
    """

    def __init__(self, url: str, prefix: str = "cafe") -> None:
        self.url = url
        self.prefix = prefix
        self._client = redis.Redis.from_url(url)

    def publish(self, event: str, payload: dict[str, Any], channel: str) -> None:
        message = encode_event(event, payload, channel)
        receivers = self._client.publish(f"{self.prefix}:{channel}", message)
        logger.debug(
            "Published %s to %s (%s receivers)", event, channel, receivers
        )


class LoggingPublisher:
    """Publisher used when no Redis is configured: logs each event."""

    def publish(self, event: str, payload: dict[str, Any], channel: str) -> None:
        logger.info("Realtime event %s on %s", event, channel)


def build_publisher() -> Publisher:
    """Create the publisher configured in settings."""
    url = getattr(settings, "REDIS_URL", "")
    if url:
        prefix = getattr(settings, "REALTIME_CHANNEL_PREFIX", "cafe")
        logger.info("Realtime events publish to Redis (prefix=%s)", prefix)
        return RedisPublisher(url, prefix=prefix)

    logger.info("No REDIS_URL configured - realtime events are only logged")
    return LoggingPublisher()


def get_publisher() -> Publisher:
    """Return the process-wide publisher owned by the realtime app."""
    return django_apps.get_app_config("realtime").publisher  # type: ignore[attr-defined]


def safe_publish(
    publisher: Publisher,
    event: str,
    payload: dict[str, Any],
    channel: str,
) -> bool:
    """
    Publish without letting transport errors reach the caller.

    Returns:
        True if the publisher accepted the event, False if it raised.
    """
    try:
        publisher.publish(event, payload, channel)
    except Exception:
        logger.exception("Failed to publish %s to %s", event, channel)
        return False
    return True
