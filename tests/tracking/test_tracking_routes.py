# tests/tracking/test_tracking_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.tracking import schemas as tracking_schemas
from guardhub.tracking.models import RealTimeLocation
from guardhub.tracking.services import TrackingService


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


# --- Routes ---


@pytest.mark.asyncio
@patch.object(TrackingService, "upsert_location", new_callable=AsyncMock)
async def test_share_location(
    mock_upsert: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_upsert.return_value = RealTimeLocation(
        id=uuid4(),
        user_id=mock_current_officer.id,
        latitude=6.5,
        longitude=3.4,
        battery_level=80,
        is_active=True,
        updated_at=datetime.now(timezone.utc),
    )

    response = await async_client.put(
        "/tracking/location", json={"latitude": 6.5, "longitude": 3.4, "battery_level": 80}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_active"] is True
    assert response.json()["battery_level"] == 80


@pytest.mark.asyncio
async def test_location_out_of_bounds(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.put("/tracking/location", json={"latitude": 91, "longitude": 3.4})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(TrackingService, "stop_tracking", new_callable=AsyncMock)
async def test_stop_tracking(
    mock_stop: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_stop.return_value = None
    response = await async_client.post("/tracking/stop")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["detail"] == "Location sharing stopped"


@pytest.mark.asyncio
@patch.object(TrackingService, "active_locations", new_callable=AsyncMock)
async def test_active_locations_for_management(
    mock_active: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_active.return_value = [
        tracking_schemas.ActiveLocationRead(
            id=uuid4(),
            user_id=uuid4(),
            latitude=6.5,
            longitude=3.4,
            is_active=True,
            updated_at=datetime.now(timezone.utc),
            full_name="Officer Test",
            role=UserRole.SECURITY_OFFICER,
        )
    ]

    response = await async_client.get("/tracking/active")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["role"] == "security_officer"


@pytest.mark.asyncio
async def test_officer_cannot_see_active_locations(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/tracking/active")
    assert response.status_code == status.HTTP_403_FORBIDDEN


# --- Service Rules ---


@pytest.mark.asyncio
async def test_first_update_creates_row(mock_db: AsyncMock, fake_officer: Profile) -> None:
    mock_db.execute.return_value = _result(None)

    location = await TrackingService(mock_db).upsert_location(
        fake_officer, tracking_schemas.LocationUpdate(latitude=6.5, longitude=3.4)
    )

    assert location.user_id == fake_officer.id
    assert location.is_active is True
    mock_db.add.assert_called_once_with(location)


@pytest.mark.asyncio
async def test_update_reuses_existing_row(mock_db: AsyncMock, fake_officer: Profile) -> None:
    existing = RealTimeLocation(id=uuid4(), user_id=fake_officer.id, latitude=0.0, longitude=0.0, is_active=False)
    mock_db.execute.return_value = _result(existing)

    location = await TrackingService(mock_db).upsert_location(
        fake_officer, tracking_schemas.LocationUpdate(latitude=6.5, longitude=3.4, heading=90)
    )

    assert location is existing
    assert (location.latitude, location.longitude, location.heading) == (6.5, 3.4, 90)
    assert location.is_active is True
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
async def test_stop_without_location_is_noop(mock_db: AsyncMock, fake_officer: Profile) -> None:
    mock_db.execute.return_value = _result(None)
    assert await TrackingService(mock_db).stop_tracking(fake_officer) is None
    mock_db.commit.assert_not_awaited()
