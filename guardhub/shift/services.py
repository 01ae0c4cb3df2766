"""
shift/services.py

Shift Service Layer
- Week / month range listing with role scoping
- Scheduling, status changes and deletion
"""

import logging
from datetime import date, datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction, UserRole
from guardhub.database.models import Profile
from guardhub.shift import schemas
from guardhub.shift.models import Shift
from guardhub.site.models import Site
from guardhub.utils.dates import month_window, week_window

logger = logging.getLogger(__name__)


def view_window(view: schemas.ShiftView, reference: date) -> tuple[datetime, datetime]:
    if view == schemas.ShiftView.MONTH:
        return month_window(reference)
    return week_window(reference)


def to_shift_read(shift: Shift) -> schemas.ShiftRead:
    return schemas.ShiftRead(
        id=shift.id,
        site_id=shift.site_id,
        site_name=shift.site.name if shift.site else None,
        guard_id=shift.guard_id,
        guard_name=shift.guard.full_name if shift.guard else None,
        start_time=shift.start_time,
        end_time=shift.end_time,
        status=shift.status,
        notes=shift.notes,
        created_at=shift.created_at,
    )


class ShiftService:
    """Service class for shift scheduling."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_shift_in_scope(self, user: Profile, shift_id: UUID) -> Shift:
        result = await self.db.execute(
            select(Shift)
            .options(selectinload(Shift.site), selectinload(Shift.guard))
            .filter(Shift.id == shift_id)
            .execution_options(populate_existing=True)
        )
        shift = result.scalar_one_or_none()
        if not shift:
            logger.warning(f"[SHIFT] Shift not found: {shift_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift not found")
        resolve_company_scope(user, shift.site.company_id)
        return shift

    async def list_shifts(
        self,
        user: Profile,
        view: schemas.ShiftView,
        reference: date,
        company_id: UUID | None = None,
    ) -> list[schemas.ShiftRead]:
        start, end = view_window(view, reference)
        stmt = (
            select(Shift)
            .options(selectinload(Shift.site), selectinload(Shift.guard))
            .filter(Shift.start_time >= start, Shift.start_time <= end)
            .order_by(Shift.start_time.asc())
        )
        if user.role == UserRole.SECURITY_OFFICER:
            stmt = stmt.filter(Shift.guard_id == user.id)
        else:
            scope = resolve_company_scope(user, company_id)
            if scope is not None:
                stmt = stmt.join(Site, Shift.site_id == Site.id).filter(Site.company_id == scope)

        result = await self.db.execute(stmt)
        shifts = result.scalars().all()
        logger.debug(f"[SHIFT] {len(shifts)} shifts in {view.value} window {start} .. {end}")
        return [to_shift_read(s) for s in shifts]

    async def create_shift(self, user: Profile, payload: schemas.ShiftCreate) -> schemas.ShiftRead:
        site = await self.db.get(Site, payload.site_id)
        if not site:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
        resolve_company_scope(user, site.company_id)

        guard = await self.db.get(Profile, payload.guard_id)
        if not guard or guard.company_id != site.company_id:
            logger.warning(f"[SHIFT] Guard {payload.guard_id} not in company {site.company_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Guard does not belong to this site's company"
            )

        shift = Shift(**payload.model_dump())
        self.db.add(shift)
        await self.db.flush()
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "shift",
            shift.id,
            payload.model_dump(),
        )
        await self.db.commit()
        logger.info(f"[SHIFT] Scheduled shift {shift.id} for guard {guard.id} at site {site.id}")
        return to_shift_read(await self._get_shift_in_scope(user, shift.id))

    async def update_status(
        self, user: Profile, shift_id: UUID, payload: schemas.ShiftStatusUpdate
    ) -> schemas.ShiftRead:
        shift = await self._get_shift_in_scope(user, shift_id)
        previous = shift.status
        shift.status = payload.status
        record_audit(
            self.db,
            user.id,
            AuditAction.UPDATE,
            "shift",
            shift.id,
            {"status": payload.status.value, "previous": previous.value},
        )
        await self.db.commit()
        logger.info(f"[SHIFT] Shift {shift.id} status {previous.value} -> {payload.status.value}")
        return to_shift_read(shift)

    async def delete_shift(self, user: Profile, shift_id: UUID) -> None:
        shift = await self._get_shift_in_scope(user, shift_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "shift", shift.id)
        await self.db.delete(shift)
        await self.db.commit()
        logger.info(f"[SHIFT] Deleted shift {shift_id}")
