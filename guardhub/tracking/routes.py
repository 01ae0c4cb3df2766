"""
tracking/routes.py

Tracking Routes
- Share / update own location
- Stop sharing
- Active locations for the dashboard map
"""

from fastapi import APIRouter, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.core.schemas import MessageResponse
from guardhub.tracking import schemas
from guardhub.tracking.services import TrackingService

router = APIRouter(prefix="/tracking", tags=["Tracking"])


@router.put(
    "/location",
    response_model=schemas.LocationRead,
    status_code=status.HTTP_200_OK,
    summary="Update Own Location",
    description="Creates or replaces the caller's live location and marks it active.",
)
@limiter.limit("120/minute")
async def update_location(
    request: Request, payload: schemas.LocationUpdate, db: DBDep, current_user: CurrentUserDep
) -> schemas.LocationRead:
    return await TrackingService(db).upsert_location(current_user, payload)


@router.post(
    "/stop",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Stop Sharing Location",
)
@limiter.limit("20/minute")
async def stop_tracking(request: Request, db: DBDep, current_user: CurrentUserDep) -> MessageResponse:
    await TrackingService(db).stop_tracking(current_user)
    return MessageResponse(detail="Location sharing stopped")


@router.get(
    "/active",
    response_model=list[schemas.ActiveLocationRead],
    status_code=status.HTTP_200_OK,
    summary="Active Locations",
)
@limiter.limit("60/minute")
async def active_locations(
    request: Request, db: DBDep, current_user: ManagementDep
) -> list[schemas.ActiveLocationRead]:
    return await TrackingService(db).active_locations(current_user)
