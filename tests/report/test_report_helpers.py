"""
tests/report/test_report_helpers.py

Unit tests for the reporting aggregation helpers.
"""

from datetime import date, datetime, timezone

from guardhub.incident.models import IncidentSeverity
from guardhub.report.services import count_by_member, per_day_counts, trailing_days
from guardhub.shift.models import ShiftStatus


def test_trailing_days_oldest_first_ending_today() -> None:
    days = trailing_days(date(2024, 3, 3))
    assert len(days) == 7
    assert days[0] == date(2024, 2, 26)
    assert days[-1] == date(2024, 3, 3)


def test_per_day_counts_fills_missing_days_with_zero() -> None:
    days = trailing_days(date(2024, 3, 3), count=3)
    stamps = [
        datetime(2024, 3, 1, 9, tzinfo=timezone.utc),
        datetime(2024, 3, 3, 1, tzinfo=timezone.utc),
        datetime(2024, 3, 3, 23, tzinfo=timezone.utc),
        datetime(2024, 2, 1, 12, tzinfo=timezone.utc),
    ]
    counts = per_day_counts(stamps, days)
    assert [(c.date, c.count) for c in counts] == [
        (date(2024, 3, 1), 1),
        (date(2024, 3, 2), 0),
        (date(2024, 3, 3), 2),
    ]


def test_count_by_member_includes_every_severity() -> None:
    counts = count_by_member(
        [IncidentSeverity.HIGH, IncidentSeverity.HIGH, IncidentSeverity.CRITICAL], IncidentSeverity
    )
    assert counts == {"low": 0, "medium": 0, "high": 2, "critical": 1}


def test_count_by_member_shift_statuses() -> None:
    counts = count_by_member([ShiftStatus.ACTIVE], ShiftStatus)
    assert counts["active"] == 1
    assert counts["scheduled"] == 0
    assert set(counts) == {"scheduled", "active", "completed", "cancelled"}
