"""
tracking/services.py

Live location tracking: each user owns a single row that is upserted
while sharing is on and flagged inactive when they stop.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.models import Profile
from guardhub.tracking import schemas
from guardhub.tracking.models import RealTimeLocation

logger = logging.getLogger(__name__)


def to_active_location(location: RealTimeLocation) -> schemas.ActiveLocationRead:
    data = schemas.LocationRead.model_validate(location).model_dump()
    return schemas.ActiveLocationRead(
        **data,
        full_name=location.user.full_name if location.user else None,
        role=location.user.role if location.user else None,
    )


class TrackingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _own_location(self, user: Profile) -> RealTimeLocation | None:
        result = await self.db.execute(select(RealTimeLocation).filter(RealTimeLocation.user_id == user.id))
        return result.scalar_one_or_none()

    async def upsert_location(self, user: Profile, payload: schemas.LocationUpdate) -> RealTimeLocation:
        location = await self._own_location(user)
        if location is None:
            location = RealTimeLocation(user_id=user.id)
            self.db.add(location)
        for field, value in payload.model_dump().items():
            setattr(location, field, value)
        location.is_active = True
        await self.db.commit()
        await self.db.refresh(location)
        logger.debug(f"[TRACKING] {user.id} at ({location.latitude}, {location.longitude})")
        return location

    async def stop_tracking(self, user: Profile) -> RealTimeLocation | None:
        location = await self._own_location(user)
        if location is None:
            return None
        location.is_active = False
        await self.db.commit()
        await self.db.refresh(location)
        logger.info(f"[TRACKING] {user.id} stopped sharing location")
        return location

    async def active_locations(self, user: Profile) -> list[schemas.ActiveLocationRead]:
        company_id = resolve_company_scope(user)
        stmt = (
            select(RealTimeLocation)
            .join(Profile, Profile.id == RealTimeLocation.user_id)
            .options(selectinload(RealTimeLocation.user))
            .filter(RealTimeLocation.is_active.is_(True))
            .order_by(RealTimeLocation.updated_at.desc())
        )
        if company_id is not None:
            stmt = stmt.filter(Profile.company_id == company_id)
        result = await self.db.execute(stmt)
        return [to_active_location(loc) for loc in result.scalars().all()]
