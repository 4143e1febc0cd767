"""
Event Schema.

Defines the Event dataclass carried between the REST API and the gateway.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class Event:
    """
    Event published by the API and forwarded to socket clients.

    ``room`` is None for events every client receives, or a room name
    such as ``work:12`` for events only that room's members receive.
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    room: str | None = None
    ts: str | None = None
    v: int = 1  # Schema version

    def __post_init__(self) -> None:
        if not self.type or not isinstance(self.type, str):
            raise ValueError("Event type must be a non-empty string")

        if self.data is not None and not isinstance(self.data, dict):
            raise ValueError("Event data must be a dict or None")

        if self.room is not None and (not isinstance(self.room, str) or not self.room):
            raise ValueError("Event room must be a non-empty string or None")

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        data = asdict(self)
        data["data"] = data["data"] or {}
        data["ts"] = data["ts"] or datetime.now(timezone.utc).isoformat()
        return json.dumps(data, ensure_ascii=False, default=str)

    @classmethod
    def from_json(cls, json_str: str) -> "Event":
        """Deserialize event from JSON string (validated in __post_init__)."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError("Event payload must be a JSON object")
        return cls(**data)
