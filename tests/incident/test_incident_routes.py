# tests/incident/test_incident_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.models import Profile
from guardhub.incident import schemas as incident_schemas
from guardhub.incident import services as incident_services
from guardhub.incident.models import Incident, IncidentSeverity, IncidentStatus
from guardhub.incident.services import IncidentService
from guardhub.site.models import Site

# --- Helpers ---


def create_incident_read(
    reported_by: UUID, status_: IncidentStatus = IncidentStatus.OPEN
) -> incident_schemas.IncidentRead:
    now = datetime.now(timezone.utc)
    return incident_schemas.IncidentRead(
        id=uuid4(),
        site_id=uuid4(),
        site_name="Harbour Gate",
        reported_by=reported_by,
        reporter_name="Officer Test",
        title="Broken fence",
        description="North side fence cut open",
        severity=IncidentSeverity.HIGH,
        status=status_,
        occurred_at=now,
        created_at=now,
    )


def create_db_incident(reporter: Profile, company_id: UUID) -> Incident:
    now = datetime.now(timezone.utc)
    site = Site(id=uuid4(), company_id=company_id, name="Harbour Gate", address="")
    return Incident(
        id=uuid4(),
        site_id=site.id,
        site=site,
        reported_by=reporter.id,
        reporter=reporter,
        title="Broken fence",
        description="North side fence cut open",
        severity=IncidentSeverity.HIGH,
        status=IncidentStatus.OPEN,
        occurred_at=now,
        media_urls=[],
        created_at=now,
    )


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


# --- Routes ---


@pytest.mark.asyncio
@patch.object(IncidentService, "create_incident", new_callable=AsyncMock)
async def test_officer_reports_incident(
    mock_create: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_create.return_value = create_incident_read(mock_current_officer.id)

    response = await async_client.post(
        "/incidents",
        json={
            "site_id": str(uuid4()),
            "title": "Broken fence",
            "description": "North side fence cut open",
            "severity": "high",
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "open"
    assert response.json()["reported_by"] == str(mock_current_officer.id)


@pytest.mark.asyncio
@patch.object(IncidentService, "list_incidents", new_callable=AsyncMock)
async def test_list_incidents_with_filters(
    mock_list: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [create_incident_read(uuid4())]

    response = await async_client.get("/incidents", params={"status": "open", "severity": "high"})

    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 1
    mock_list.assert_awaited_once_with(
        mock_current_site_manager, IncidentStatus.OPEN, IncidentSeverity.HIGH, None
    )


@pytest.mark.asyncio
async def test_officer_cannot_change_incident_status(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.patch(f"/incidents/{uuid4()}/status", json={"status": "resolved"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(IncidentService, "update_status", new_callable=AsyncMock)
async def test_manager_resolves_incident(
    mock_update: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_update.return_value = create_incident_read(uuid4(), IncidentStatus.RESOLVED)

    response = await async_client.patch(f"/incidents/{uuid4()}/status", json={"status": "resolved"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "resolved"


# --- Service Rules ---


@pytest.mark.asyncio
async def test_officer_cannot_touch_someone_elses_incident(
    mock_db: AsyncMock, fake_officer: Profile, fake_site_manager: Profile
) -> None:
    incident = create_db_incident(fake_site_manager, fake_officer.company_id)
    mock_db.execute.return_value = _result(incident)

    with pytest.raises(HTTPException) as exc:
        await IncidentService(mock_db).update_status(
            fake_officer, incident.id, incident_schemas.IncidentStatusUpdate(status=IncidentStatus.CLOSED)
        )
    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_update_status_records_previous_value(mock_db: AsyncMock, fake_site_manager: Profile) -> None:
    incident = create_db_incident(fake_site_manager, fake_site_manager.company_id)
    mock_db.execute.return_value = _result(incident)

    result = await IncidentService(mock_db).update_status(
        fake_site_manager, incident.id, incident_schemas.IncidentStatusUpdate(status=IncidentStatus.INVESTIGATING)
    )

    assert result.status == IncidentStatus.INVESTIGATING
    audit_row = mock_db.add.call_args.args[0]
    assert audit_row.changes == {"status": "investigating", "previous": "open"}
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
@patch.object(incident_services, "upload_file_to_s3", new_callable=AsyncMock)
async def test_attach_media_appends_url(
    mock_upload: AsyncMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    incident = create_db_incident(fake_officer, fake_officer.company_id)
    incident.media_urls = ["https://cdn.example.com/first.jpg"]
    mock_db.execute.return_value = _result(incident)
    mock_upload.return_value = "https://cdn.example.com/second.jpg"

    result = await IncidentService(mock_db).attach_media(fake_officer, incident.id, MagicMock())

    assert result.media_urls == ["https://cdn.example.com/first.jpg", "https://cdn.example.com/second.jpg"]
    key_prefix = mock_upload.await_args.args[1]
    assert key_prefix == f"incident-media/{fake_officer.company_id}/{incident.id}"
