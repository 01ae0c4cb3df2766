"""
staff/routes.py

Staff Routes
- List / create / update staff, toggle active status
- Employment and assignment history
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import AdminDep, CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.staff import schemas
from guardhub.staff.services import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get(
    "",
    response_model=list[schemas.StaffRead],
    status_code=status.HTTP_200_OK,
    summary="List Staff",
)
@limiter.limit("60/minute")
async def list_staff(
    request: Request,
    db: DBDep,
    current_user: ManagementDep,
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.StaffRead]:
    staff = await StaffService(db).list_staff(current_user, company_id)
    return [schemas.StaffRead.model_validate(s) for s in staff]


@router.post(
    "",
    response_model=schemas.StaffRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Staff Member",
    description="Creates an officer or site manager with a per-company staff code (e.g. SO-0007).",
)
@limiter.limit("20/minute")
async def create_staff(
    request: Request, payload: schemas.StaffCreate, db: DBDep, current_user: AdminDep
) -> schemas.StaffRead:
    staff = await StaffService(db).create_staff(current_user, payload)
    return schemas.StaffRead.model_validate(staff)


@router.get(
    "/{staff_id}",
    response_model=schemas.StaffRead,
    status_code=status.HTTP_200_OK,
    summary="Get Staff Member",
)
@limiter.limit("60/minute")
async def get_staff(
    request: Request, staff_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> schemas.StaffRead:
    staff = await StaffService(db).get_staff_in_scope(current_user, staff_id)
    return schemas.StaffRead.model_validate(staff)


@router.put(
    "/{staff_id}",
    response_model=schemas.StaffRead,
    status_code=status.HTTP_200_OK,
    summary="Update Staff Member",
)
@limiter.limit("20/minute")
async def update_staff(
    request: Request,
    staff_id: UUID,
    payload: schemas.StaffUpdate,
    db: DBDep,
    current_user: AdminDep,
) -> schemas.StaffRead:
    staff = await StaffService(db).update_staff(current_user, staff_id, payload)
    return schemas.StaffRead.model_validate(staff)


@router.patch(
    "/{staff_id}/toggle-status",
    response_model=schemas.StaffRead,
    status_code=status.HTTP_200_OK,
    summary="Activate / Deactivate Staff Member",
    description="Deactivation closes the current employment record with an optional reason.",
)
@limiter.limit("20/minute")
async def toggle_staff_status(
    request: Request,
    staff_id: UUID,
    db: DBDep,
    current_user: AdminDep,
    payload: schemas.StaffStatusToggle | None = None,
) -> schemas.StaffRead:
    staff = await StaffService(db).toggle_staff_status(
        current_user, staff_id, payload.reason if payload else None
    )
    return schemas.StaffRead.model_validate(staff)


@router.get(
    "/{staff_id}/employment-history",
    response_model=list[schemas.EmploymentHistoryRead],
    status_code=status.HTTP_200_OK,
    summary="Employment History",
)
@limiter.limit("30/minute")
async def employment_history(
    request: Request, staff_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> list[schemas.EmploymentHistoryRead]:
    return await StaffService(db).employment_history(current_user, staff_id)


@router.get(
    "/{staff_id}/assignments",
    response_model=schemas.AssignmentHistoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Assignment History",
    description="Shifts worked by the staff member with hours and a summary.",
)
@limiter.limit("30/minute")
async def assignment_history(
    request: Request, staff_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> schemas.AssignmentHistoryResponse:
    return await StaffService(db).assignment_history(current_user, staff_id)
