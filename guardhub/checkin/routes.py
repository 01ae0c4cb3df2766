"""
checkin/routes.py

Check-In Routes
- Check in at a checkpoint (multipart: QR text, selfie, coordinates)
- Scannable checkpoints and recent check-ins of the calling officer
"""

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from guardhub.checkin import schemas
from guardhub.checkin.services import CheckInService
from guardhub.core.dependencies import DBDep, OfficerDep
from guardhub.core.limiter import limiter

router = APIRouter(prefix="/check-ins", tags=["Check-Ins"])


@router.post(
    "",
    response_model=schemas.CheckInRead,
    status_code=status.HTTP_201_CREATED,
    summary="Check In at Checkpoint",
    description="Send the decoded QR text, a selfie and optionally the device coordinates.",
)
@limiter.limit("30/minute")
async def check_in(
    request: Request,
    db: DBDep,
    current_user: OfficerDep,
    qr_code: str = Form(..., min_length=1, description="Decoded QR payload"),
    photo: UploadFile | None = File(None, description="Selfie taken at the checkpoint"),
    latitude: float | None = Form(None, ge=-90, le=90),
    longitude: float | None = Form(None, ge=-180, le=180),
) -> schemas.CheckInRead:
    return await CheckInService(db).check_in(current_user, qr_code, photo, latitude, longitude)


@router.get(
    "/checkpoints",
    response_model=list[schemas.CheckInCheckpoint],
    status_code=status.HTTP_200_OK,
    summary="Scannable Checkpoints",
)
@limiter.limit("60/minute")
async def list_checkpoints(
    request: Request, db: DBDep, current_user: OfficerDep
) -> list[schemas.CheckInCheckpoint]:
    return await CheckInService(db).list_checkpoints(current_user)


@router.get(
    "/recent",
    response_model=list[schemas.CheckInRead],
    status_code=status.HTTP_200_OK,
    summary="Recent Check-Ins",
    description="The caller's last 10 check-ins, newest first.",
)
@limiter.limit("60/minute")
async def recent_check_ins(request: Request, db: DBDep, current_user: OfficerDep) -> list[schemas.CheckInRead]:
    return await CheckInService(db).recent_check_ins(current_user)
