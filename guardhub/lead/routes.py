"""
lead/routes.py

Lead Routes
- Public contact form submission
- Super admin listing and status updates
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from guardhub.core.dependencies import DBDep, PaginationParams, SuperAdminDep
from guardhub.core.limiter import limiter
from guardhub.core.schemas import PaginatedResponse
from guardhub.lead import schemas
from guardhub.lead.models import LeadStatus
from guardhub.lead.services import LeadService

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.post(
    "",
    response_model=schemas.LeadRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Contact Form",
    description="Public endpoint. Stores the enquiry and notifies the sales inbox.",
)
@limiter.limit("5/minute")
async def submit_lead(request: Request, payload: schemas.LeadCreate, db: DBDep) -> schemas.LeadRead:
    return await LeadService(db).submit_lead(payload)


@router.get(
    "",
    response_model=PaginatedResponse[schemas.LeadRead],
    status_code=status.HTTP_200_OK,
    summary="List Leads",
    description="Newest first. Requires Super Admin role.",
)
@limiter.limit("30/minute")
async def list_leads(
    request: Request,
    db: DBDep,
    current_user: SuperAdminDep,
    status_filter: LeadStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100, description="Matches name, email or company"),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[schemas.LeadRead]:
    leads, total_count = await LeadService(db).list_leads(
        status_filter, search, skip=pagination.skip, limit=pagination.limit
    )
    return PaginatedResponse(
        total_count=total_count,
        has_next_page=(pagination.skip + pagination.limit) < total_count,
        items=[schemas.LeadRead.model_validate(lead) for lead in leads],
    )


@router.patch(
    "/{lead_id}/status",
    response_model=schemas.LeadRead,
    status_code=status.HTTP_200_OK,
    summary="Update Lead Status",
)
@limiter.limit("20/minute")
async def update_lead_status(
    request: Request, lead_id: UUID, payload: schemas.LeadStatusUpdate, db: DBDep, current_user: SuperAdminDep
) -> schemas.LeadRead:
    return await LeadService(db).update_status(current_user, lead_id, payload.status)
