# tests/shift/test_shift_routes.py
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.shift import schemas as shift_schemas
from guardhub.shift.models import ShiftStatus
from guardhub.shift.services import ShiftService
from guardhub.site.models import Site

# --- Helper ---


def create_shift_read(guard_id: UUID, status_: ShiftStatus = ShiftStatus.SCHEDULED) -> shift_schemas.ShiftRead:
    return shift_schemas.ShiftRead(
        id=uuid4(),
        site_id=uuid4(),
        site_name="Harbour Gate",
        guard_id=guard_id,
        guard_name="Officer Test",
        start_time=datetime(2024, 3, 12, 8, tzinfo=timezone.utc),
        end_time=datetime(2024, 3, 12, 16, tzinfo=timezone.utc),
        status=status_,
        notes=None,
        created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


# --- Routes ---


@pytest.mark.asyncio
@patch.object(ShiftService, "list_shifts", new_callable=AsyncMock)
async def test_list_shifts_month_view(
    mock_list: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [create_shift_read(mock_current_officer.id)]

    response = await async_client.get("/shifts", params={"view": "month", "reference_date": "2024-03-12"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["guard_id"] == str(mock_current_officer.id)
    args = mock_list.await_args.args
    assert args[1] == shift_schemas.ShiftView.MONTH
    assert args[2] == date(2024, 3, 12)


@pytest.mark.asyncio
async def test_list_shifts_rejects_unknown_view(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/shifts", params={"view": "year"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(ShiftService, "create_shift", new_callable=AsyncMock)
async def test_create_shift(
    mock_create: AsyncMock,
    fake_officer: Profile,
    mock_current_site_manager: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_create.return_value = create_shift_read(fake_officer.id)
    payload = {
        "site_id": str(uuid4()),
        "guard_id": str(fake_officer.id),
        "start_time": "2024-03-12T08:00:00Z",
        "end_time": "2024-03-12T16:00:00Z",
    }

    response = await async_client.post("/shifts", json=payload)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == ShiftStatus.SCHEDULED.value


@pytest.mark.asyncio
async def test_create_shift_end_before_start(
    mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    payload = {
        "site_id": str(uuid4()),
        "guard_id": str(uuid4()),
        "start_time": "2024-03-12T16:00:00Z",
        "end_time": "2024-03-12T08:00:00Z",
    }
    response = await async_client.post("/shifts", json=payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_officer_cannot_create_shift(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    payload = {
        "site_id": str(uuid4()),
        "guard_id": str(mock_current_officer.id),
        "start_time": "2024-03-12T08:00:00Z",
        "end_time": "2024-03-12T16:00:00Z",
    }
    response = await async_client.post("/shifts", json=payload)
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(ShiftService, "update_status", new_callable=AsyncMock)
async def test_update_shift_status(
    mock_update: AsyncMock,
    fake_officer: Profile,
    mock_current_company_admin: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_update.return_value = create_shift_read(fake_officer.id, ShiftStatus.CANCELLED)

    response = await async_client.patch(f"/shifts/{uuid4()}/status", json={"status": "cancelled"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "cancelled"


@pytest.mark.asyncio
@patch.object(ShiftService, "delete_shift", new_callable=AsyncMock)
async def test_delete_shift_not_found(
    mock_delete: AsyncMock, mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_delete.side_effect = HTTPException(status_code=404, detail="Shift not found")
    response = await async_client.delete(f"/shifts/{uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


# --- Service Rules ---


@pytest.mark.asyncio
async def test_create_shift_guard_from_other_company(
    mock_db: AsyncMock, fake_site_manager: Profile, profile_factory
) -> None:
    site = Site(id=uuid4(), company_id=fake_site_manager.company_id, name="Harbour Gate", address="")
    outsider = profile_factory(UserRole.SECURITY_OFFICER, company_id=uuid4())
    mock_db.get.side_effect = [site, outsider]
    payload = shift_schemas.ShiftCreate(
        site_id=site.id,
        guard_id=outsider.id,
        start_time=datetime(2024, 3, 12, 8, tzinfo=timezone.utc),
        end_time=datetime(2024, 3, 12, 16, tzinfo=timezone.utc),
    )

    with pytest.raises(HTTPException) as exc:
        await ShiftService(mock_db).create_shift(fake_site_manager, payload)
    assert exc.value.status_code == 400
    mock_db.add.assert_not_called()
