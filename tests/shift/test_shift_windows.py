"""
tests/shift/test_shift_windows.py

Unit tests for shift validation and calendar view windows.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from guardhub.shift.schemas import ShiftCreate, ShiftView
from guardhub.shift.services import view_window


def test_end_must_follow_start() -> None:
    start = datetime(2024, 5, 1, 8, tzinfo=timezone.utc)
    with pytest.raises(ValidationError, match="End time must be after start time"):
        ShiftCreate(site_id=uuid4(), guard_id=uuid4(), start_time=start, end_time=start)


def test_valid_shift() -> None:
    start = datetime(2024, 5, 1, 8, tzinfo=timezone.utc)
    shift = ShiftCreate(site_id=uuid4(), guard_id=uuid4(), start_time=start, end_time=start + timedelta(hours=8))
    assert shift.end_time > shift.start_time


def test_week_view_window() -> None:
    start, end = view_window(ShiftView.WEEK, date(2024, 5, 1))
    assert start.date() == date(2024, 4, 28)
    assert end.date() == date(2024, 5, 4)


def test_month_view_window() -> None:
    start, end = view_window(ShiftView.MONTH, date(2024, 4, 17))
    assert start.date() == date(2024, 4, 1)
    assert end.date() == date(2024, 4, 30)
