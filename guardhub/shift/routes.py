"""
shift/routes.py

Shift Routes
- Range listing (week / month)
- Create, status update and delete (non-officers)
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.shift import schemas
from guardhub.shift.services import ShiftService

router = APIRouter(prefix="/shifts", tags=["Shifts"])


@router.get(
    "",
    response_model=list[schemas.ShiftRead],
    status_code=status.HTTP_200_OK,
    summary="List Shifts",
    description="Shifts starting in the week (Sunday-Saturday) or month containing `reference_date`.",
)
@limiter.limit("60/minute")
async def list_shifts(
    request: Request,
    db: DBDep,
    current_user: CurrentUserDep,
    view: schemas.ShiftView = Query(schemas.ShiftView.WEEK),
    reference_date: date | None = Query(None, description="Defaults to today"),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.ShiftRead]:
    return await ShiftService(db).list_shifts(
        current_user, view, reference_date or date.today(), company_id
    )


@router.post(
    "",
    response_model=schemas.ShiftRead,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule Shift",
)
@limiter.limit("30/minute")
async def create_shift(
    request: Request, payload: schemas.ShiftCreate, db: DBDep, current_user: ManagementDep
) -> schemas.ShiftRead:
    return await ShiftService(db).create_shift(current_user, payload)


@router.patch(
    "/{shift_id}/status",
    response_model=schemas.ShiftRead,
    status_code=status.HTTP_200_OK,
    summary="Update Shift Status",
)
@limiter.limit("30/minute")
async def update_shift_status(
    request: Request,
    shift_id: UUID,
    payload: schemas.ShiftStatusUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.ShiftRead:
    return await ShiftService(db).update_status(current_user, shift_id, payload)


@router.delete(
    "/{shift_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Shift",
)
@limiter.limit("20/minute")
async def delete_shift(request: Request, shift_id: UUID, db: DBDep, current_user: ManagementDep) -> None:
    await ShiftService(db).delete_shift(current_user, shift_id)
