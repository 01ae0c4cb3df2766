# tests/checkin/test_checkin_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.checkin import schemas as checkin_schemas
from guardhub.checkin import services as checkin_services
from guardhub.checkin.services import (
    INVALID_QR_MESSAGE,
    MISSING_PHOTO_MESSAGE,
    CheckInService,
    checkin_photo_key,
)
from guardhub.database.models import Profile
from guardhub.patrol.models import Checkpoint

QR_TEXT = "CHECKPOINT-1700000000000-AB12CD"


def _checkpoint() -> Checkpoint:
    return Checkpoint(
        id=uuid4(),
        route_id=uuid4(),
        name="Main Gate",
        description="Front entrance",
        qr_code=QR_TEXT,
        order_index=0,
    )


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


# --- Routes ---


@pytest.mark.asyncio
@patch.object(CheckInService, "check_in", new_callable=AsyncMock)
async def test_check_in_multipart(
    mock_check_in: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_check_in.return_value = checkin_schemas.CheckInRead(
        id=uuid4(),
        checkpoint_id=uuid4(),
        checkpoint_name="Main Gate",
        guard_id=mock_current_officer.id,
        checked_in_at=datetime.now(timezone.utc),
        photo_url="https://cdn.example.com/selfie.jpg",
    )

    response = await async_client.post(
        "/check-ins",
        data={"qr_code": QR_TEXT, "latitude": "6.5", "longitude": "3.4"},
        files={"photo": ("selfie.jpg", b"\xff\xd8\xff\xe0fakejpeg", "image/jpeg")},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["checkpoint_name"] == "Main Gate"
    args = mock_check_in.await_args.args
    assert args[1] == QR_TEXT
    assert args[3] == 6.5


@pytest.mark.asyncio
async def test_manager_cannot_check_in(
    mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post("/check-ins", data={"qr_code": QR_TEXT})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(CheckInService, "recent_check_ins", new_callable=AsyncMock)
async def test_recent_check_ins(
    mock_recent: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_recent.return_value = []
    response = await async_client.get("/check-ins/recent")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


@pytest.mark.asyncio
@patch.object(CheckInService, "list_checkpoints", new_callable=AsyncMock)
async def test_scannable_checkpoints(
    mock_list: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [
        checkin_schemas.CheckInCheckpoint(id=uuid4(), name="Main Gate", route_id=uuid4(), order_index=0)
    ]
    response = await async_client.get("/check-ins/checkpoints")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["name"] == "Main Gate"


# --- Service Rules ---


def test_photo_key_layout() -> None:
    folder, name = checkin_photo_key("company-1", "guard-9", 1700000000000)
    assert folder == "check-in-photos/company-1"
    assert name == "checkin-guard-9-1700000000000.jpg"


@pytest.mark.asyncio
async def test_unknown_qr_code_is_rejected(mock_db: AsyncMock, fake_officer: Profile) -> None:
    mock_db.execute.return_value = _result(None)

    with pytest.raises(HTTPException) as exc:
        await CheckInService(mock_db).check_in(fake_officer, "garbage", MagicMock(filename="selfie.jpg"))
    assert exc.value.status_code == 404
    assert exc.value.detail == INVALID_QR_MESSAGE


@pytest.mark.asyncio
async def test_missing_photo_is_rejected_after_qr_lookup(mock_db: AsyncMock, fake_officer: Profile) -> None:
    mock_db.execute.return_value = _result(_checkpoint())

    with pytest.raises(HTTPException) as exc:
        await CheckInService(mock_db).check_in(fake_officer, QR_TEXT, None)
    assert exc.value.status_code == 400
    assert exc.value.detail == MISSING_PHOTO_MESSAGE
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
@patch.object(checkin_services, "upload_file_to_s3", new_callable=AsyncMock)
async def test_successful_check_in(
    mock_upload: AsyncMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    checkpoint = _checkpoint()
    mock_db.execute.return_value = _result(checkpoint)
    mock_db.add.side_effect = lambda obj: setattr(obj, "id", uuid4())
    mock_upload.return_value = "https://cdn.example.com/check-in-photos/selfie.jpg"

    result = await CheckInService(mock_db).check_in(
        fake_officer, f"  {QR_TEXT} ", MagicMock(filename="selfie.jpg"), 6.5, 3.4
    )

    assert result.checkpoint_id == checkpoint.id
    assert result.checkpoint_name == "Main Gate"
    assert result.guard_id == fake_officer.id
    assert result.photo_url.endswith("selfie.jpg")
    assert result.latitude == 6.5
    folder = mock_upload.await_args.args[1]
    assert folder == f"check-in-photos/{fake_officer.company_id}"
    assert mock_upload.await_args.kwargs["object_name"].startswith(f"checkin-{fake_officer.id}-")
    mock_db.commit.assert_awaited_once()
