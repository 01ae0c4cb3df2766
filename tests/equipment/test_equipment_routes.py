# tests/equipment/test_equipment_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.equipment import schemas as equipment_schemas
from guardhub.equipment.models import EquipmentStatus, EquipmentType
from guardhub.equipment.services import EquipmentService


def create_equipment_read(company_id: UUID, **overrides) -> equipment_schemas.EquipmentRead:
    data = {
        "id": uuid4(),
        "company_id": company_id,
        "name": "Radio #4",
        "type": EquipmentType.RADIO,
        "status": EquipmentStatus.AVAILABLE,
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return equipment_schemas.EquipmentRead(**data)


# --- Routes ---


@pytest.mark.asyncio
@patch.object(EquipmentService, "list_equipment", new_callable=AsyncMock)
async def test_list_equipment(
    mock_list: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [create_equipment_read(mock_current_site_manager.company_id)]

    response = await async_client.get("/equipment")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["type"] == "radio"


@pytest.mark.asyncio
async def test_officer_cannot_list_equipment(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/equipment")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(EquipmentService, "create_equipment", new_callable=AsyncMock)
async def test_create_assigned_equipment(
    mock_create: AsyncMock,
    fake_officer: Profile,
    mock_current_company_admin: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_create.return_value = create_equipment_read(
        mock_current_company_admin.company_id,
        status=EquipmentStatus.ASSIGNED,
        assigned_to=fake_officer.id,
        holder_name=fake_officer.full_name,
    )

    response = await async_client.post(
        "/equipment", json={"name": "Radio #4", "type": "radio", "assigned_to": str(fake_officer.id)}
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "assigned"
    assert response.json()["holder_name"] == fake_officer.full_name


@pytest.mark.asyncio
async def test_create_equipment_unknown_type(
    mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post("/equipment", json={"name": "Laser", "type": "laser"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(EquipmentService, "delete_equipment", new_callable=AsyncMock)
async def test_delete_equipment(
    mock_delete: AsyncMock, mock_current_site_manager: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.delete(f"/equipment/{uuid4()}")
    assert response.status_code == status.HTTP_204_NO_CONTENT
    mock_delete.assert_awaited_once()


# --- Service Rules ---


@pytest.mark.asyncio
async def test_holder_from_other_company_is_rejected(
    mock_db: AsyncMock, fake_company_admin: Profile, profile_factory
) -> None:
    outsider = profile_factory(UserRole.SECURITY_OFFICER, company_id=uuid4())
    mock_db.get.return_value = outsider
    payload = equipment_schemas.EquipmentCreate(name="Radio #9", assigned_to=outsider.id)

    with pytest.raises(HTTPException) as exc:
        await EquipmentService(mock_db).create_equipment(fake_company_admin, payload)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Holder does not belong to this company"
    mock_db.add.assert_not_called()
