"""
report/routes.py

Report Routes
- Dashboard (every role)
- Analytics and daily report (management)
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.report import schemas
from guardhub.report.services import DEFAULT_ANALYTICS_DAYS, ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/dashboard",
    response_model=schemas.DashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Dashboard",
    description="Counters, recent incidents and upcoming shifts for the caller's role.",
)
@limiter.limit("30/minute")
async def dashboard(request: Request, db: DBDep, current_user: CurrentUserDep) -> schemas.DashboardResponse:
    return await ReportService(db).dashboard(current_user)


@router.get(
    "/analytics",
    response_model=schemas.AnalyticsResponse,
    status_code=status.HTTP_200_OK,
    summary="Analytics",
)
@limiter.limit("20/minute")
async def analytics(
    request: Request,
    db: DBDep,
    current_user: ManagementDep,
    days: int = Query(DEFAULT_ANALYTICS_DAYS, ge=1, le=365),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> schemas.AnalyticsResponse:
    return await ReportService(db).analytics(current_user, days, company_id)


@router.get(
    "/daily",
    response_model=schemas.DailyReport,
    status_code=status.HTTP_200_OK,
    summary="Daily Report",
)
@limiter.limit("20/minute")
async def daily_report(
    request: Request,
    db: DBDep,
    current_user: ManagementDep,
    report_date: date | None = Query(None, description="Defaults to today (UTC)"),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> schemas.DailyReport:
    return await ReportService(db).daily_report(current_user, report_date, company_id)
