# tests/report/test_report_routes.py
from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.models import Profile
from guardhub.report import schemas as report_schemas
from guardhub.report import services as report_services
from guardhub.report.services import ReportService


def create_daily_report(report_date: date) -> report_schemas.DailyReport:
    return report_schemas.DailyReport(
        report_date=report_date,
        total_shifts=12,
        active_shifts=4,
        completed_shifts=6,
        incidents=2,
        incidents_by_severity={"low": 1, "medium": 0, "high": 1, "critical": 0},
        check_ins=40,
        sos_alerts=0,
        guards_total=15,
        guards_active=13,
    )


# --- Routes ---


@pytest.mark.asyncio
@patch.object(ReportService, "dashboard", new_callable=AsyncMock)
async def test_officer_dashboard(
    mock_dashboard: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_dashboard.return_value = report_schemas.DashboardResponse(
        stats=report_schemas.DashboardStats(active_shifts=1, reported_incidents=3),
        recent_incidents=[],
        upcoming_shifts=[],
    )

    response = await async_client.get("/reports/dashboard")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["stats"]["reported_incidents"] == 3


@pytest.mark.asyncio
async def test_officer_cannot_see_analytics(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/reports/analytics")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_analytics_window_is_bounded(
    mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/reports/analytics", params={"days": 400})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(ReportService, "daily_report", new_callable=AsyncMock)
async def test_daily_report(
    mock_daily: AsyncMock, mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_daily.return_value = create_daily_report(date(2024, 3, 12))

    response = await async_client.get("/reports/daily", params={"report_date": "2024-03-12"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["check_ins"] == 40
    mock_daily.assert_awaited_once_with(mock_current_company_admin, date(2024, 3, 12), None)


# --- Service Rules ---


@pytest.mark.asyncio
@patch.object(report_services, "cache_get", new_callable=AsyncMock)
async def test_daily_report_served_from_cache(
    mock_cache_get: AsyncMock, mock_db: AsyncMock, fake_company_admin: Profile
) -> None:
    cached = create_daily_report(date(2024, 3, 12))
    mock_cache_get.return_value = cached.model_dump(mode="json")

    report = await ReportService(mock_db).daily_report(fake_company_admin, date(2024, 3, 12))

    assert report == cached
    key = mock_cache_get.await_args.args[0]
    assert key == f"guardhub:daily:{fake_company_admin.company_id}:2024-03-12"
    mock_db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_analytics_rejects_foreign_company(mock_db: AsyncMock, fake_site_manager: Profile) -> None:
    with pytest.raises(HTTPException) as exc:
        await ReportService(mock_db).analytics(fake_site_manager, 30, uuid4())
    assert exc.value.status_code == 403
