"""
Redis pub/sub subscriber for the WebSocket gateway.
Listens on every ``mooprompt:*`` channel and hands validated events
to a callback.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from shared.config.logging import ws_gateway_logger as logger
from shared.config.settings import settings
from shared.infrastructure.events import (
    GATEWAY_PATTERN,
    Event,
    get_redis_pool,
    room_for_channel,
)

RECONNECT_DELAY_SECONDS = 1.0
MAX_RECONNECT_DELAY_SECONDS = 30.0


def parse_message(channel: str, raw: str) -> Event | None:
    """
    Decode one pub/sub message.

    The room comes from the channel name, not the payload, so a
    publisher cannot address a room it did not publish to.

    Returns:
        The event, or None when the message is malformed.
    """
    try:
        event = Event.from_json(raw)
        event.room = room_for_channel(channel)
    except (ValueError, TypeError) as e:
        logger.warning("Invalid event dropped", channel=channel, error=str(e))
        return None
    return event


async def run_subscriber(
    on_event: Callable[[Event], Awaitable[None]],
    pattern: str = GATEWAY_PATTERN,
) -> None:
    """
    Subscribe to ``pattern`` and dispatch events until cancelled.

    Connection errors are retried with exponential backoff, up to
    ``redis_max_reconnect_attempts`` consecutive failures.
    """
    attempts = 0
    delay = RECONNECT_DELAY_SECONDS

    while True:
        pubsub = None
        try:
            redis_pool = await get_redis_pool()
            pubsub = redis_pool.pubsub()
            await pubsub.psubscribe(pattern)
            logger.info("Redis subscriber started", pattern=pattern)
            attempts = 0
            delay = RECONNECT_DELAY_SECONDS

            async for msg in pubsub.listen():
                if msg is None or msg.get("type") != "pmessage":
                    continue
                event = parse_message(msg["channel"], msg["data"])
                if event is None:
                    continue
                try:
                    await on_event(event)
                except Exception as e:
                    logger.error("Error dispatching event", event_type=event.type, error=str(e), exc_info=True)

        except asyncio.CancelledError:
            logger.info("Redis subscriber cancelled")
            raise
        except Exception as e:
            attempts += 1
            if attempts > settings.redis_max_reconnect_attempts:
                logger.critical("Redis subscriber giving up", attempts=attempts, error=str(e))
                raise
            logger.warning("Redis subscriber disconnected, retrying", attempt=attempts, delay=delay, error=str(e))
            await asyncio.sleep(delay)
            delay = min(delay * 2, MAX_RECONNECT_DELAY_SECONDS)
        finally:
            if pubsub is not None:
                try:
                    await pubsub.punsubscribe(pattern)
                    await pubsub.aclose()
                except Exception as e:
                    logger.debug("Error closing pubsub", error=str(e))
