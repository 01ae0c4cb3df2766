"""
sos/routes.py

SOS Routes
- Raise an alert (officers)
- List alerts (role scoped)
- Acknowledge / resolve (supervisors)
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep, OfficerDep
from guardhub.core.limiter import limiter
from guardhub.sos import schemas
from guardhub.sos.models import SOSStatus
from guardhub.sos.services import SOSService

router = APIRouter(prefix="/sos", tags=["SOS Alerts"])


@router.post(
    "",
    response_model=schemas.SOSAlertRead,
    status_code=status.HTTP_201_CREATED,
    summary="Raise SOS Alert",
)
@limiter.limit("10/minute")
async def raise_alert(
    request: Request, payload: schemas.SOSAlertCreate, db: DBDep, current_user: OfficerDep
) -> schemas.SOSAlertRead:
    return await SOSService(db).raise_alert(current_user, payload)


@router.get(
    "",
    response_model=list[schemas.SOSAlertRead],
    status_code=status.HTTP_200_OK,
    summary="List SOS Alerts",
)
@limiter.limit("60/minute")
async def list_alerts(
    request: Request,
    db: DBDep,
    current_user: CurrentUserDep,
    status_filter: SOSStatus | None = Query(None, alias="status"),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.SOSAlertRead]:
    return await SOSService(db).list_alerts(current_user, status_filter, company_id)


@router.patch(
    "/{alert_id}/acknowledge",
    response_model=schemas.SOSAlertRead,
    status_code=status.HTTP_200_OK,
    summary="Acknowledge SOS Alert",
)
@limiter.limit("30/minute")
async def acknowledge_alert(
    request: Request, alert_id: UUID, db: DBDep, current_user: ManagementDep
) -> schemas.SOSAlertRead:
    return await SOSService(db).acknowledge_alert(current_user, alert_id)


@router.patch(
    "/{alert_id}/resolve",
    response_model=schemas.SOSAlertRead,
    status_code=status.HTTP_200_OK,
    summary="Resolve SOS Alert",
)
@limiter.limit("30/minute")
async def resolve_alert(
    request: Request, alert_id: UUID, db: DBDep, current_user: ManagementDep
) -> schemas.SOSAlertRead:
    return await SOSService(db).resolve_alert(current_user, alert_id)
