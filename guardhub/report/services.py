"""
report/services.py

Reporting Service Layer
- Role-aware dashboard counters with recent incidents and upcoming shifts
- Rolling analytics (cached in Redis for a short TTL)
- Daily operations report
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from enum import Enum
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.checkin.models import CheckIn
from guardhub.core.cache import cache_get, cache_key, cache_set
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.equipment.models import Equipment
from guardhub.incident.models import Incident, IncidentSeverity, IncidentStatus
from guardhub.incident.services import to_incident_read
from guardhub.report import schemas
from guardhub.shift.models import Shift, ShiftStatus
from guardhub.shift.services import to_shift_read
from guardhub.site.models import Site
from guardhub.sos.models import SOSAlert, SOSStatus
from guardhub.utils.dates import day_window, utcnow

logger = logging.getLogger(__name__)

DEFAULT_ANALYTICS_DAYS = 30
TREND_DAYS = 7
RECENT_LIMIT = 5
GUARD_ROLES = (UserRole.SECURITY_OFFICER, UserRole.SITE_MANAGER)


# ---------------------------------------------------
# Aggregation helpers
# ---------------------------------------------------
def trailing_days(today: date, count: int = TREND_DAYS) -> list[date]:
    """The last `count` days ending with today, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def per_day_counts(timestamps: Iterable[datetime], days: list[date]) -> list[schemas.DayCount]:
    counts = Counter(ts.date() for ts in timestamps)
    return [schemas.DayCount(date=day, count=counts.get(day, 0)) for day in days]


def count_by_member(values: Iterable[Enum], members: Iterable[Enum]) -> dict[str, int]:
    """Counts per enum value; every member is present, zero when unseen."""
    counts = Counter(v.value for v in values)
    return {m.value: counts.get(m.value, 0) for m in members}


# ---------------------------------------------------
# Scope helpers
# ---------------------------------------------------
def _shift_scope(stmt: Select, company_id: UUID | None) -> Select:
    if company_id is None:
        return stmt
    return stmt.join(Site, Site.id == Shift.site_id).filter(Site.company_id == company_id)


def _incident_scope(stmt: Select, company_id: UUID | None) -> Select:
    if company_id is None:
        return stmt
    return stmt.join(Site, Site.id == Incident.site_id).filter(Site.company_id == company_id)


def _guard_scope(stmt: Select, guard_column, company_id: UUID | None) -> Select:
    if company_id is None:
        return stmt
    return stmt.join(Profile, Profile.id == guard_column).filter(Profile.company_id == company_id)


class ReportService:
    """Read-only reporting over the operational tables."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _count(self, stmt: Select) -> int:
        return (await self.db.execute(stmt)).scalar_one() or 0

    async def _column(self, stmt: Select) -> list:
        return list((await self.db.execute(stmt)).scalars().all())

    # ---------------------------------------------------
    # Dashboard
    # ---------------------------------------------------
    async def dashboard(self, user: Profile) -> schemas.DashboardResponse:
        if user.role == UserRole.SECURITY_OFFICER:
            stats = await self._officer_stats(user)
        else:
            stats = await self._management_stats(resolve_company_scope(user))

        return schemas.DashboardResponse(
            stats=stats,
            recent_incidents=await self._recent_incidents(user),
            upcoming_shifts=await self._upcoming_shifts(user),
        )

    async def _officer_stats(self, user: Profile) -> schemas.DashboardStats:
        active_shifts = await self._count(
            select(func.count(Shift.id)).filter(Shift.guard_id == user.id, Shift.status == ShiftStatus.ACTIVE)
        )
        reported = await self._count(select(func.count(Incident.id)).filter(Incident.reported_by == user.id))
        return schemas.DashboardStats(active_shifts=active_shifts, reported_incidents=reported)

    async def _management_stats(self, company_id: UUID | None) -> schemas.DashboardStats:
        users = select(func.count(Profile.id))
        sites = select(func.count(Site.id)).filter(Site.is_active.is_(True))
        equipment = select(func.count(Equipment.id))
        if company_id is not None:
            users = users.filter(Profile.company_id == company_id)
            sites = sites.filter(Site.company_id == company_id)
            equipment = equipment.filter(Equipment.company_id == company_id)

        return schemas.DashboardStats(
            total_users=await self._count(users),
            active_sites=await self._count(sites),
            active_shifts=await self._count(
                _shift_scope(select(func.count(Shift.id)).filter(Shift.status == ShiftStatus.ACTIVE), company_id)
            ),
            open_incidents=await self._count(
                _incident_scope(
                    select(func.count(Incident.id)).filter(Incident.status == IncidentStatus.OPEN), company_id
                )
            ),
            active_sos_alerts=await self._count(
                _guard_scope(
                    select(func.count(SOSAlert.id)).filter(SOSAlert.status == SOSStatus.ACTIVE),
                    SOSAlert.guard_id,
                    company_id,
                )
            ),
            equipment_count=await self._count(equipment),
        )

    async def _recent_incidents(self, user: Profile) -> list:
        stmt = (
            select(Incident)
            .options(selectinload(Incident.site), selectinload(Incident.reporter))
            .order_by(Incident.created_at.desc())
            .limit(RECENT_LIMIT)
        )
        if user.role == UserRole.SECURITY_OFFICER:
            stmt = stmt.filter(Incident.reported_by == user.id)
        else:
            stmt = _incident_scope(stmt, resolve_company_scope(user))
        return [to_incident_read(i) for i in await self._column(stmt)]

    async def _upcoming_shifts(self, user: Profile) -> list:
        stmt = (
            select(Shift)
            .options(selectinload(Shift.site), selectinload(Shift.guard))
            .filter(Shift.start_time >= utcnow(), Shift.status == ShiftStatus.SCHEDULED)
            .order_by(Shift.start_time.asc())
            .limit(RECENT_LIMIT)
        )
        if user.role == UserRole.SECURITY_OFFICER:
            stmt = stmt.filter(Shift.guard_id == user.id)
        else:
            stmt = _shift_scope(stmt, resolve_company_scope(user))
        return [to_shift_read(s) for s in await self._column(stmt)]

    # ---------------------------------------------------
    # Analytics
    # ---------------------------------------------------
    async def analytics(
        self, user: Profile, days: int = DEFAULT_ANALYTICS_DAYS, company_id: UUID | None = None
    ) -> schemas.AnalyticsResponse:
        scope = resolve_company_scope(user, company_id)
        key = cache_key("analytics", scope, days)
        cached = await cache_get(key)
        if cached is not None:
            return schemas.AnalyticsResponse.model_validate(cached)

        now = utcnow()
        since = now - timedelta(days=days)
        trend = trailing_days(now.date())
        trend_start = day_window(trend[0])[0]

        guards = select(func.count(Profile.id)).filter(Profile.role.in_(GUARD_ROLES))
        if scope is not None:
            guards = guards.filter(Profile.company_id == scope)

        incidents = await self.db.execute(
            _incident_scope(select(Incident.created_at, Incident.severity), scope).filter(
                Incident.created_at >= since
            )
        )
        incident_rows = incidents.all()
        check_in_times = await self._column(
            _guard_scope(select(CheckIn.checked_in_at), CheckIn.guard_id, scope).filter(
                CheckIn.checked_in_at >= since
            )
        )
        shift_statuses = await self._column(
            _shift_scope(select(Shift.status), scope).filter(Shift.start_time >= since)
        )
        active_shifts = await self._count(
            _shift_scope(select(func.count(Shift.id)).filter(Shift.status == ShiftStatus.ACTIVE), scope)
        )

        severities = [row.severity for row in incident_rows]
        response = schemas.AnalyticsResponse(
            days=days,
            total_guards=await self._count(guards),
            active_shifts=active_shifts,
            total_incidents=len(incident_rows),
            total_check_ins=len(check_in_times),
            critical_incidents=sum(1 for s in severities if s == IncidentSeverity.CRITICAL),
            incidents_per_day=per_day_counts(
                (row.created_at for row in incident_rows if row.created_at >= trend_start), trend
            ),
            incidents_by_severity=count_by_member(severities, IncidentSeverity),
            check_ins_per_day=per_day_counts((t for t in check_in_times if t >= trend_start), trend),
            shifts_by_status=count_by_member(shift_statuses, ShiftStatus),
        )
        await cache_set(key, response.model_dump(mode="json"))
        logger.info(f"[REPORT] Analytics computed for scope={scope or 'platform'} days={days}")
        return response

    # ---------------------------------------------------
    # Daily report
    # ---------------------------------------------------
    async def daily_report(
        self, user: Profile, report_date: date | None = None, company_id: UUID | None = None
    ) -> schemas.DailyReport:
        scope = resolve_company_scope(user, company_id)
        report_date = report_date or utcnow().date()
        key = cache_key("daily", scope, report_date.isoformat())
        cached = await cache_get(key)
        if cached is not None:
            return schemas.DailyReport.model_validate(cached)

        start, end = day_window(report_date)

        shifts = await self.db.execute(
            _shift_scope(select(Shift.status, Shift.guard_id), scope).filter(
                Shift.start_time >= start, Shift.start_time <= end
            )
        )
        shift_rows = shifts.all()
        severities = await self._column(
            _incident_scope(select(Incident.severity), scope).filter(
                Incident.created_at >= start, Incident.created_at <= end
            )
        )
        check_ins = await self._count(
            _guard_scope(select(func.count(CheckIn.id)), CheckIn.guard_id, scope).filter(
                CheckIn.checked_in_at >= start, CheckIn.checked_in_at <= end
            )
        )
        sos_alerts = await self._count(
            _guard_scope(select(func.count(SOSAlert.id)), SOSAlert.guard_id, scope).filter(
                SOSAlert.created_at >= start, SOSAlert.created_at <= end
            )
        )
        guards = select(func.count(Profile.id)).filter(Profile.role == UserRole.SECURITY_OFFICER)
        if scope is not None:
            guards = guards.filter(Profile.company_id == scope)

        report = schemas.DailyReport(
            report_date=report_date,
            total_shifts=len(shift_rows),
            active_shifts=sum(1 for row in shift_rows if row.status == ShiftStatus.ACTIVE),
            completed_shifts=sum(1 for row in shift_rows if row.status == ShiftStatus.COMPLETED),
            incidents=len(severities),
            incidents_by_severity=count_by_member(severities, IncidentSeverity),
            check_ins=check_ins,
            sos_alerts=sos_alerts,
            guards_total=await self._count(guards),
            guards_active=len({row.guard_id for row in shift_rows if row.status == ShiftStatus.ACTIVE}),
        )
        await cache_set(key, report.model_dump(mode="json"))
        return report
