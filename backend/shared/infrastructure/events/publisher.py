"""
Event publishing.

Broadcasts are fire-and-forget: a handler commits its transaction first,
then calls ``emit``. Publish failures are logged and never reach the
caller, so a Redis outage costs live updates, not requests.
"""

from __future__ import annotations

from typing import Any, Protocol

from shared.config.logging import get_logger
from .channels import channel_for_room
from .event_schema import Event
from .event_types import MAX_EVENT_SIZE
from .redis_pool import get_redis_sync_client

logger = get_logger(__name__)


class EventPublisher(Protocol):
    def publish(self, event: Event) -> int: ...


def _validate_event_size(event_json: str, event_type: str) -> None:
    """Raise ValueError when an event is larger than a socket frame allows."""
    size = len(event_json.encode("utf-8"))
    if size > MAX_EVENT_SIZE:
        raise ValueError(
            f"Event {event_type} exceeds max size: {size} > {MAX_EVENT_SIZE} bytes"
        )


class RedisEventPublisher:
    """Publishes events to Redis pub/sub through the sync pool."""

    def publish(self, event: Event) -> int:
        """
        Publish one event.

        Returns:
            Number of subscribers that received the message.
        """
        event_json = event.to_json()
        _validate_event_size(event_json, event.type)
        client = get_redis_sync_client()
        return client.publish(channel_for_room(event.room), event_json)


_publisher: EventPublisher | None = None


def get_event_publisher() -> EventPublisher:
    """Get the process-wide publisher (Redis unless replaced)."""
    global _publisher
    if _publisher is None:
        _publisher = RedisEventPublisher()
    return _publisher


def set_event_publisher(publisher: EventPublisher | None) -> None:
    """Replace the process-wide publisher. None restores the Redis default."""
    global _publisher
    _publisher = publisher


def emit(event_type: str, data: dict[str, Any] | None = None, room: str | None = None) -> bool:
    """
    Broadcast an event without failing the caller.

    Returns:
        True when the event was handed to the publisher.
    """
    try:
        event = Event(type=event_type, data=data or {}, room=room)
        get_event_publisher().publish(event)
        return True
    except Exception as e:
        logger.error(
            "Failed to publish event",
            event_type=event_type,
            room=room,
            error=str(e),
        )
        return False
