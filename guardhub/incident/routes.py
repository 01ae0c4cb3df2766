"""
incident/routes.py

Incident Routes
- Report an incident, attach media
- List incidents (role scoped, filterable)
- Update status (supervisors only)
"""

from uuid import UUID

from fastapi import APIRouter, File, Query, Request, UploadFile, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.incident import schemas
from guardhub.incident.models import IncidentSeverity, IncidentStatus
from guardhub.incident.services import IncidentService

router = APIRouter(prefix="/incidents", tags=["Incidents"])


@router.post(
    "",
    response_model=schemas.IncidentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Report Incident",
)
@limiter.limit("20/minute")
async def create_incident(
    request: Request, payload: schemas.IncidentCreate, db: DBDep, current_user: CurrentUserDep
) -> schemas.IncidentRead:
    return await IncidentService(db).create_incident(current_user, payload)


@router.post(
    "/{incident_id}/media",
    response_model=schemas.IncidentRead,
    status_code=status.HTTP_200_OK,
    summary="Attach Incident Media",
    description="Uploads an image or video (max 10MB) and attaches it to the incident.",
)
@limiter.limit("10/minute")
async def attach_incident_media(
    request: Request,
    incident_id: UUID,
    db: DBDep,
    current_user: CurrentUserDep,
    file: UploadFile = File(...),
) -> schemas.IncidentRead:
    return await IncidentService(db).attach_media(current_user, incident_id, file)


@router.get(
    "",
    response_model=list[schemas.IncidentRead],
    status_code=status.HTTP_200_OK,
    summary="List Incidents",
)
@limiter.limit("60/minute")
async def list_incidents(
    request: Request,
    db: DBDep,
    current_user: CurrentUserDep,
    status_filter: IncidentStatus | None = Query(None, alias="status"),
    severity: IncidentSeverity | None = Query(None),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.IncidentRead]:
    return await IncidentService(db).list_incidents(current_user, status_filter, severity, company_id)


@router.patch(
    "/{incident_id}/status",
    response_model=schemas.IncidentRead,
    status_code=status.HTTP_200_OK,
    summary="Update Incident Status",
)
@limiter.limit("30/minute")
async def update_incident_status(
    request: Request,
    incident_id: UUID,
    payload: schemas.IncidentStatusUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.IncidentRead:
    return await IncidentService(db).update_status(current_user, incident_id, payload)
