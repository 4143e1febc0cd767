"""
Real-time notifications via Redis pub/sub.

- event_types.py: event name constants shared with the web clients
- event_schema.py: Event dataclass with validation
- channels.py: channel and room naming
- redis_pool.py: async and sync connection pools
- publisher.py: fire-and-forget ``emit``
"""

from .event_types import (
    SESSION_OPENED,
    SESSION_CANCELLED,
    ORDER_NEW,
    ORDER_WAITING,
    ORDER_COOKING,
    ORDER_DONE,
    ORDER_SERVED,
    ORDER_STATUS_EVENTS,
    MENU_UNAVAILABLE,
    BILLING_CLOSED,
    CHECKPOINT_UPDATED,
    ACTIVITY_NEW,
    COMMENT_NEW,
    MAX_EVENT_SIZE,
)
from .event_schema import Event
from .channels import (
    CHANNEL_PREFIX,
    GLOBAL_CHANNEL,
    GATEWAY_PATTERN,
    work_room,
    channel_for_room,
    room_for_channel,
)
from .redis_pool import (
    get_redis_pool,
    get_redis_sync_client,
    close_redis_pool,
    close_redis_sync_client,
)
from .publisher import (
    EventPublisher,
    RedisEventPublisher,
    get_event_publisher,
    set_event_publisher,
    emit,
)

__all__ = [
    "SESSION_OPENED",
    "SESSION_CANCELLED",
    "ORDER_NEW",
    "ORDER_WAITING",
    "ORDER_COOKING",
    "ORDER_DONE",
    "ORDER_SERVED",
    "ORDER_STATUS_EVENTS",
    "MENU_UNAVAILABLE",
    "BILLING_CLOSED",
    "CHECKPOINT_UPDATED",
    "ACTIVITY_NEW",
    "COMMENT_NEW",
    "MAX_EVENT_SIZE",
    "Event",
    "CHANNEL_PREFIX",
    "GLOBAL_CHANNEL",
    "GATEWAY_PATTERN",
    "work_room",
    "channel_for_room",
    "room_for_channel",
    "get_redis_pool",
    "get_redis_sync_client",
    "close_redis_pool",
    "close_redis_sync_client",
    "EventPublisher",
    "RedisEventPublisher",
    "get_event_publisher",
    "set_event_publisher",
    "emit",
]
