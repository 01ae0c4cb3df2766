"""
equipment/routes.py

Equipment Routes
- List / create / update / delete company equipment
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.equipment import schemas
from guardhub.equipment.services import EquipmentService

router = APIRouter(prefix="/equipment", tags=["Equipment"])


@router.get(
    "",
    response_model=list[schemas.EquipmentRead],
    status_code=status.HTTP_200_OK,
    summary="List Equipment",
)
@limiter.limit("60/minute")
async def list_equipment(
    request: Request,
    db: DBDep,
    current_user: ManagementDep,
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.EquipmentRead]:
    return await EquipmentService(db).list_equipment(current_user, company_id)


@router.post(
    "",
    response_model=schemas.EquipmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Equipment",
)
@limiter.limit("30/minute")
async def create_equipment(
    request: Request, payload: schemas.EquipmentCreate, db: DBDep, current_user: ManagementDep
) -> schemas.EquipmentRead:
    return await EquipmentService(db).create_equipment(current_user, payload)


@router.put(
    "/{item_id}",
    response_model=schemas.EquipmentRead,
    status_code=status.HTTP_200_OK,
    summary="Update Equipment",
    description="Setting a holder marks the item assigned; clearing it makes an assigned item available.",
)
@limiter.limit("30/minute")
async def update_equipment(
    request: Request,
    item_id: UUID,
    payload: schemas.EquipmentUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.EquipmentRead:
    return await EquipmentService(db).update_equipment(current_user, item_id, payload)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Equipment",
)
@limiter.limit("20/minute")
async def delete_equipment(request: Request, item_id: UUID, db: DBDep, current_user: ManagementDep) -> None:
    await EquipmentService(db).delete_equipment(current_user, item_id)
