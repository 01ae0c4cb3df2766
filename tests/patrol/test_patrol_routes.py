# tests/patrol/test_patrol_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.models import Profile
from guardhub.patrol import schemas as patrol_schemas
from guardhub.patrol.models import Checkpoint
from guardhub.patrol.qr import render_qr_png
from guardhub.patrol.services import PatrolService

# --- Helpers ---


def create_route_read(company_id: UUID, checkpoint_count: int = 0) -> patrol_schemas.PatrolRouteRead:
    return patrol_schemas.PatrolRouteRead(
        id=uuid4(),
        company_id=company_id,
        site_id=uuid4(),
        site_name="Harbour Gate",
        name="Perimeter Loop",
        is_active=True,
        checkpoint_count=checkpoint_count,
        created_at=datetime.now(timezone.utc),
    )


def create_db_checkpoint(route_id: UUID, order_index: int = 0) -> Checkpoint:
    return Checkpoint(
        id=uuid4(),
        route_id=route_id,
        name=f"Gate {order_index + 1}",
        description=None,
        qr_code="CHECKPOINT-1700000000000-AB12CD",
        order_index=order_index,
        latitude=None,
        longitude=None,
        created_at=datetime.now(timezone.utc),
    )


# --- Routes ---


@pytest.mark.asyncio
@patch.object(PatrolService, "list_routes", new_callable=AsyncMock)
async def test_list_routes_for_site(
    mock_list: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    site_id = uuid4()
    mock_list.return_value = [create_route_read(mock_current_officer.company_id, 3)]

    response = await async_client.get("/patrol/routes", params={"site_id": str(site_id)})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["checkpoint_count"] == 3
    mock_list.assert_awaited_once_with(mock_current_officer, site_id, None)


@pytest.mark.asyncio
@patch.object(PatrolService, "create_route", new_callable=AsyncMock)
async def test_create_route_with_checkpoints(
    mock_create: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_create.return_value = create_route_read(mock_current_site_manager.company_id, 2)

    response = await async_client.post(
        "/patrol/routes",
        json={
            "name": "Perimeter Loop",
            "site_id": str(uuid4()),
            "checkpoints": [{"name": "Gate 1"}, {"name": "Gate 2"}],
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    payload = mock_create.await_args.args[1]
    assert [c.name for c in payload.checkpoints] == ["Gate 1", "Gate 2"]


@pytest.mark.asyncio
async def test_officer_cannot_create_route(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post("/patrol/routes", json={"name": "Loop", "site_id": str(uuid4())})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(PatrolService, "list_checkpoints", new_callable=AsyncMock)
async def test_list_checkpoints_in_order(
    mock_list: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    route_id = uuid4()
    mock_list.return_value = [create_db_checkpoint(route_id, 0), create_db_checkpoint(route_id, 1)]

    response = await async_client.get(f"/patrol/routes/{route_id}/checkpoints")

    assert response.status_code == status.HTTP_200_OK
    assert [c["order_index"] for c in response.json()] == [0, 1]


@pytest.mark.asyncio
@patch.object(PatrolService, "add_checkpoint", new_callable=AsyncMock)
async def test_add_checkpoint(
    mock_add: AsyncMock, mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    route_id = uuid4()
    mock_add.return_value = create_db_checkpoint(route_id, 4)

    response = await async_client.post(f"/patrol/routes/{route_id}/checkpoints", json={"name": "Gate 5"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["qr_code"].startswith("CHECKPOINT-")


@pytest.mark.asyncio
@patch.object(PatrolService, "checkpoint_qr_png", new_callable=AsyncMock)
async def test_checkpoint_qr_png(
    mock_qr: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_qr.return_value = render_qr_png("CHECKPOINT-1700000000000-AB12CD")

    response = await async_client.get(f"/patrol/checkpoints/{uuid4()}/qr")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


@pytest.mark.asyncio
@patch.object(PatrolService, "delete_checkpoint", new_callable=AsyncMock)
async def test_delete_missing_checkpoint(
    mock_delete: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_delete.side_effect = HTTPException(status_code=404, detail="Checkpoint not found")
    response = await async_client.delete(f"/patrol/checkpoints/{uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
