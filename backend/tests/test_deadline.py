"""
Tests for work order deadline badges.
"""

from datetime import datetime, timedelta, timezone

import pytest

from mooprompt_api.services.flow.deadline import deadline_info

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "offset,status,text",
    [
        (timedelta(days=10), "normal", "เหลืออีก 10 วัน"),
        (timedelta(days=3, hours=5), "warning", "เหลืออีก 3 วัน 5 ชั่วโมง"),
        (timedelta(days=7), "warning", "เหลืออีก 7 วัน 0 ชั่วโมง"),
        (timedelta(days=7, hours=12), "warning", "เหลืออีก 7 วัน 12 ชั่วโมง"),
        (timedelta(days=8), "normal", "เหลืออีก 8 วัน"),
        (timedelta(hours=24, minutes=30), "urgent", "เหลืออีก 1 วัน 0 ชั่วโมง"),
        (timedelta(hours=25), "warning", "เหลืออีก 1 วัน 1 ชั่วโมง"),
        (timedelta(hours=20), "urgent", "เหลืออีก 20 ชั่วโมง"),
        (timedelta(minutes=45), "urgent", "เหลืออีก 45 นาที"),
    ],
)
def test_upcoming(offset, status, text):
    info = deadline_info(NOW + offset, NOW)
    assert info.status == status
    assert info.text == text
    assert info.is_overdue is False


@pytest.mark.parametrize(
    "offset,text",
    [
        (timedelta(days=2, hours=3), "เกินกำหนด 2 วัน"),
        (timedelta(hours=5), "เกินกำหนด 5 ชั่วโมง"),
        (timedelta(minutes=12), "เกินกำหนด 12 นาที"),
        (timedelta(seconds=5), "เกินกำหนด 1 นาที"),
    ],
)
def test_overdue(offset, text):
    info = deadline_info(NOW - offset, NOW)
    assert info.status == "urgent"
    assert info.text == text
    assert info.is_overdue is True


def test_no_deadline():
    assert deadline_info(None, NOW) is None


def test_naive_deadline_is_utc():
    naive = datetime(2024, 5, 1, 14, 0)
    assert deadline_info(naive, NOW).text == "เหลืออีก 2 ชั่วโมง"
