"""
utils/dates.py

Calendar helpers shared by scheduling and reporting:
- Sunday-to-Saturday week windows and calendar month windows
- Day boundaries and shift durations
- Epoch milliseconds used in generated identifiers
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone

END_OF_DAY = time(23, 59, 59, 999000)


def _as_date(reference: date | datetime) -> date:
    return reference.date() if isinstance(reference, datetime) else reference


def day_window(reference: date | datetime) -> tuple[datetime, datetime]:
    """00:00 to 23:59:59.999 (UTC) of the reference day."""
    day = _as_date(reference)
    return (
        datetime.combine(day, time.min, tzinfo=timezone.utc),
        datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc),
    )


def week_window(reference: date | datetime) -> tuple[datetime, datetime]:
    """
    The week containing `reference`, from Sunday 00:00 to Saturday 23:59:59.999.
    """
    day = _as_date(reference)
    # Monday=0 ... Sunday=6
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    saturday = sunday + timedelta(days=6)
    return day_window(sunday)[0], day_window(saturday)[1]


def month_window(reference: date | datetime) -> tuple[datetime, datetime]:
    """The calendar month containing `reference`."""
    day = _as_date(reference)
    last_day = calendar.monthrange(day.year, day.month)[1]
    return (
        day_window(day.replace(day=1))[0],
        day_window(day.replace(day=last_day))[1],
    )


def hours_between(start: datetime, end: datetime) -> float:
    """Duration in hours, rounded to two decimals; never negative."""
    seconds = (end - start).total_seconds()
    return round(max(seconds, 0) / 3600, 2)


def epoch_ms(moment: datetime | None = None) -> int:
    moment = moment or datetime.now(timezone.utc)
    return int(moment.timestamp() * 1000)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
