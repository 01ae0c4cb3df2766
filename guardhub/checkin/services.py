"""
checkin/services.py

Check-In Service Layer
- Resolves the scanned QR text to a checkpoint of the officer's company
- Stores the selfie in S3 and records the check-in
- Recent check-ins of the calling officer
"""

import logging

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.checkin import schemas
from guardhub.checkin.models import CheckIn
from guardhub.core.upload import IMAGE_MIME_TYPES, upload_file_to_s3
from guardhub.database.models import Profile
from guardhub.patrol.models import Checkpoint, PatrolRoute
from guardhub.utils.dates import epoch_ms, utcnow

logger = logging.getLogger(__name__)

RECENT_CHECKINS_LIMIT = 10
INVALID_QR_MESSAGE = "Invalid QR code. Please scan a valid checkpoint."
MISSING_PHOTO_MESSAGE = "Please take a selfie before checking in."


def checkin_photo_key(company_id: object, guard_id: object, millis: int) -> tuple[str, str]:
    """(folder, object name) for a check-in selfie."""
    return f"check-in-photos/{company_id}", f"checkin-{guard_id}-{millis}.jpg"


def to_checkin_read(check_in: CheckIn) -> schemas.CheckInRead:
    return schemas.CheckInRead(
        id=check_in.id,
        checkpoint_id=check_in.checkpoint_id,
        checkpoint_name=check_in.checkpoint.name if check_in.checkpoint else None,
        checkpoint_description=check_in.checkpoint.description if check_in.checkpoint else None,
        guard_id=check_in.guard_id,
        checked_in_at=check_in.checked_in_at,
        photo_url=check_in.photo_url,
        latitude=check_in.latitude,
        longitude=check_in.longitude,
    )


class CheckInService:
    """Service class for checkpoint check-ins."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _find_checkpoint(self, user: Profile, qr_code: str) -> Checkpoint:
        result = await self.db.execute(
            select(Checkpoint)
            .join(PatrolRoute, Checkpoint.route_id == PatrolRoute.id)
            .filter(
                Checkpoint.qr_code == qr_code.strip(),
                PatrolRoute.company_id == user.company_id,
            )
        )
        checkpoint = result.scalar_one_or_none()
        if not checkpoint:
            logger.warning(f"[CHECKIN] Unknown QR code '{qr_code}' scanned by {user.id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVALID_QR_MESSAGE)
        return checkpoint

    async def list_checkpoints(self, user: Profile) -> list[schemas.CheckInCheckpoint]:
        """Checkpoints on the active routes of the officer's company."""
        result = await self.db.execute(
            select(Checkpoint)
            .options(selectinload(Checkpoint.route))
            .join(PatrolRoute, Checkpoint.route_id == PatrolRoute.id)
            .filter(PatrolRoute.company_id == user.company_id, PatrolRoute.is_active.is_(True))
            .order_by(PatrolRoute.name, Checkpoint.order_index)
        )
        return [
            schemas.CheckInCheckpoint(
                id=cp.id,
                name=cp.name,
                description=cp.description,
                route_id=cp.route_id,
                route_name=cp.route.name if cp.route else None,
                order_index=cp.order_index,
            )
            for cp in result.scalars().all()
        ]

    async def check_in(
        self,
        user: Profile,
        qr_code: str,
        photo: UploadFile | None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> schemas.CheckInRead:
        checkpoint = await self._find_checkpoint(user, qr_code)

        if photo is None or not photo.filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_PHOTO_MESSAGE)

        now = utcnow()
        folder, object_name = checkin_photo_key(user.company_id, user.id, epoch_ms(now))
        photo_url = await upload_file_to_s3(
            photo, folder, object_name=object_name, allowed_mime_types=IMAGE_MIME_TYPES
        )

        check_in = CheckIn(
            checkpoint_id=checkpoint.id,
            guard_id=user.id,
            checked_in_at=now,
            photo_url=photo_url,
            latitude=latitude,
            longitude=longitude,
        )
        check_in.checkpoint = checkpoint
        self.db.add(check_in)
        await self.db.commit()
        logger.info(f"[CHECKIN] Guard {user.id} checked in at checkpoint {checkpoint.id}")
        return to_checkin_read(check_in)

    async def recent_check_ins(self, user: Profile) -> list[schemas.CheckInRead]:
        result = await self.db.execute(
            select(CheckIn)
            .options(selectinload(CheckIn.checkpoint))
            .filter(CheckIn.guard_id == user.id)
            .order_by(CheckIn.checked_in_at.desc())
            .limit(RECENT_CHECKINS_LIMIT)
        )
        return [to_checkin_read(c) for c in result.scalars().all()]
