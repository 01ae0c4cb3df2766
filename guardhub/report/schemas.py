"""
report/schemas.py

Schemas for dashboards, analytics and the daily operations report.
"""

from datetime import date

from pydantic import BaseModel, Field

from guardhub.incident.schemas import IncidentRead
from guardhub.shift.schemas import ShiftRead


class DashboardStats(BaseModel):
    total_users: int = 0
    active_sites: int = 0
    active_shifts: int = 0
    open_incidents: int = 0
    active_sos_alerts: int = 0
    equipment_count: int = 0
    reported_incidents: int = Field(0, description="Officers only: incidents they reported")


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_incidents: list[IncidentRead]
    upcoming_shifts: list[ShiftRead]


class DayCount(BaseModel):
    date: date
    count: int


class AnalyticsResponse(BaseModel):
    days: int
    total_guards: int
    active_shifts: int
    total_incidents: int
    total_check_ins: int
    critical_incidents: int
    incidents_per_day: list[DayCount]
    incidents_by_severity: dict[str, int]
    check_ins_per_day: list[DayCount]
    shifts_by_status: dict[str, int]


class DailyReport(BaseModel):
    report_date: date
    total_shifts: int
    active_shifts: int
    completed_shifts: int
    incidents: int
    incidents_by_severity: dict[str, int]
    check_ins: int
    sos_alerts: int
    guards_total: int
    guards_active: int
