"""
tests/utils/test_dates.py

Unit tests for the calendar helpers used by scheduling and reporting.
"""

from datetime import date, datetime, timedelta, timezone

from guardhub.utils.dates import END_OF_DAY, day_window, epoch_ms, hours_between, month_window, week_window


def test_day_window_covers_whole_day() -> None:
    start, end = day_window(date(2024, 3, 15))
    assert start == datetime(2024, 3, 15, 0, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert end.time() == END_OF_DAY


def test_week_window_runs_sunday_to_saturday() -> None:
    # 2024-03-13 is a Wednesday
    start, end = week_window(date(2024, 3, 13))
    assert start.date() == date(2024, 3, 10)
    assert start.weekday() == 6
    assert end.date() == date(2024, 3, 16)
    assert end.weekday() == 5


def test_week_window_on_sunday_starts_same_day() -> None:
    start, end = week_window(date(2024, 3, 10))
    assert start.date() == date(2024, 3, 10)
    assert end.date() == date(2024, 3, 16)


def test_week_window_accepts_datetime() -> None:
    start, _ = week_window(datetime(2024, 3, 16, 22, 30, tzinfo=timezone.utc))
    assert start.date() == date(2024, 3, 10)


def test_month_window_handles_leap_february() -> None:
    start, end = month_window(date(2024, 2, 10))
    assert start.date() == date(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)


def test_month_window_december() -> None:
    start, end = month_window(date(2023, 12, 31))
    assert start.date() == date(2023, 12, 1)
    assert end.date() == date(2023, 12, 31)


def test_hours_between_rounds_to_two_decimals() -> None:
    start = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert hours_between(start, start + timedelta(hours=8)) == 8.0
    assert hours_between(start, start + timedelta(minutes=100)) == 1.67


def test_hours_between_never_negative() -> None:
    start = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert hours_between(start, start - timedelta(hours=2)) == 0.0


def test_epoch_ms() -> None:
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert epoch_ms(moment) == 1704067200000
