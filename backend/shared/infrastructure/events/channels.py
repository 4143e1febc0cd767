"""
Redis Channel Naming.

Global events go to ``mooprompt:events``; events scoped to one
FlowTrak work order go to ``mooprompt:work:{id}``, which the gateway
maps to the socket room ``work:{id}``.
"""

from __future__ import annotations

CHANNEL_PREFIX = "mooprompt"
GLOBAL_CHANNEL = f"{CHANNEL_PREFIX}:events"
GATEWAY_PATTERN = f"{CHANNEL_PREFIX}:*"


def _validate_positive_id(id_value: int, name: str) -> None:
    if not isinstance(id_value, int) or id_value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {id_value}")


def work_room(work_id: int) -> str:
    """Socket room name for a work order."""
    _validate_positive_id(work_id, "work_id")
    return f"work:{work_id}"


def channel_for_room(room: str | None) -> str:
    """Redis channel carrying events for a room (or the global channel)."""
    if room is None:
        return GLOBAL_CHANNEL
    return f"{CHANNEL_PREFIX}:{room}"


def room_for_channel(channel: str) -> str | None:
    """
    Inverse of channel_for_room.

    Returns None for the global channel.
    Raises ValueError for channels outside the prefix.
    """
    if channel == GLOBAL_CHANNEL:
        return None
    prefix = f"{CHANNEL_PREFIX}:"
    if not channel.startswith(prefix):
        raise ValueError(f"Unknown channel: {channel}")
    return channel[len(prefix):]
