"""
Deadline badges for work orders.

Status thresholds count whole hours and days left: overdue or at most
24 hours is ``urgent``, at most 7 days is ``warning``, anything later is
``normal``. The text is Thai, matching what the FlowTrak screens show.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from mooprompt_api.models import as_utc, utcnow
from shared.utils.flow_schemas import DeadlineInfo

_HOUR = 3600
_DAY = 24 * _HOUR


def _overdue_text(elapsed: timedelta) -> str:
    seconds = int(elapsed.total_seconds())
    if seconds >= _DAY:
        return f"เกินกำหนด {seconds // _DAY} วัน"
    if seconds >= _HOUR:
        return f"เกินกำหนด {seconds // _HOUR} ชั่วโมง"
    return f"เกินกำหนด {max(seconds // 60, 1)} นาที"


def _remaining_text(remaining: timedelta) -> str:
    seconds = int(remaining.total_seconds())
    days = seconds // _DAY
    hours = seconds // _HOUR
    if days > 7:
        return f"เหลืออีก {days} วัน"
    if days > 0:
        return f"เหลืออีก {days} วัน {hours % 24} ชั่วโมง"
    if hours > 0:
        return f"เหลืออีก {hours} ชั่วโมง"
    return f"เหลืออีก {seconds // 60} นาที"


def deadline_info(deadline: datetime | None, now: datetime | None = None) -> DeadlineInfo | None:
    """
    Badge for a deadline, or None when the work order has none.

    Args:
        deadline: The work order deadline (naive values are read as UTC).
        now: Reference time; defaults to the current UTC time.
    """
    if deadline is None:
        return None
    deadline = as_utc(deadline)
    now = as_utc(now) if now is not None else utcnow()

    remaining = deadline - now
    if remaining.total_seconds() < 0:
        return DeadlineInfo(status="urgent", text=_overdue_text(-remaining), is_overdue=True)

    # Whole hours and days, the same counts the badge text shows
    seconds = int(remaining.total_seconds())
    if seconds // _HOUR <= 24:
        status = "urgent"
    elif seconds // _DAY <= 7:
        status = "warning"
    else:
        status = "normal"
    return DeadlineInfo(status=status, text=_remaining_text(remaining), is_overdue=False)
