"""
site/services.py

Site Service Layer
- Company-scoped CRUD for guarded sites
- Weekly schedule view (sites with their shifts, Sunday to Saturday)
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile
from guardhub.shift.models import Shift
from guardhub.site import schemas
from guardhub.site.models import Site
from guardhub.utils.dates import week_window

logger = logging.getLogger(__name__)


class SiteService:
    """Service class for site management."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_site_in_scope(self, user: Profile, site_id: UUID) -> Site:
        """Loads a site and checks the caller may touch it (404 / 403)."""
        site = await self.db.get(Site, site_id)
        if not site:
            logger.warning(f"[SITE] Site not found: {site_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
        resolve_company_scope(user, site.company_id)
        return site

    async def list_sites(self, user: Profile, company_id: UUID | None = None) -> list[Site]:
        scope = resolve_company_scope(user, company_id)
        stmt = select(Site).order_by(Site.name)
        if scope is not None:
            stmt = stmt.filter(Site.company_id == scope)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_site(self, user: Profile, payload: schemas.SiteCreate) -> Site:
        company_id = resolve_company_scope(user, payload.company_id)
        if company_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="company_id is required"
            )
        site = Site(**payload.model_dump(exclude={"company_id"}), company_id=company_id)
        self.db.add(site)
        await self.db.flush()
        record_audit(self.db, user.id, AuditAction.CREATE, "site", site.id, {"name": site.name})
        await self.db.commit()
        await self.db.refresh(site)
        logger.info(f"[SITE] Created site {site.id} for company {company_id}")
        return site

    async def update_site(self, user: Profile, site_id: UUID, payload: schemas.SiteUpdate) -> Site:
        site = await self.get_site_in_scope(user, site_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(site, field, value)
        record_audit(self.db, user.id, AuditAction.UPDATE, "site", site.id, changes)
        await self.db.commit()
        await self.db.refresh(site)
        logger.info(f"[SITE] Updated site {site.id}: {list(changes)}")
        return site

    async def delete_site(self, user: Profile, site_id: UUID) -> None:
        site = await self.get_site_in_scope(user, site_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "site", site.id, {"name": site.name})
        await self.db.delete(site)
        await self.db.commit()
        logger.info(f"[SITE] Deleted site {site_id}")

    async def weekly_view(
        self, user: Profile, reference: date, company_id: UUID | None = None
    ) -> schemas.SiteWeeklyView:
        week_start, week_end = week_window(reference)
        sites = await self.list_sites(user, company_id)

        shifts_by_site: dict[UUID, list[schemas.SiteShiftSlot]] = {site.id: [] for site in sites}
        if sites:
            result = await self.db.execute(
                select(Shift)
                .options(selectinload(Shift.guard))
                .filter(
                    Shift.site_id.in_(list(shifts_by_site)),
                    Shift.start_time >= week_start,
                    Shift.start_time <= week_end,
                )
                .order_by(Shift.start_time)
            )
            for shift in result.scalars().all():
                shifts_by_site[shift.site_id].append(
                    schemas.SiteShiftSlot(
                        id=shift.id,
                        guard_id=shift.guard_id,
                        guard_name=shift.guard.full_name if shift.guard else None,
                        start_time=shift.start_time,
                        end_time=shift.end_time,
                        status=shift.status,
                    )
                )

        logger.debug(f"[SITE] Weekly view {week_start.date()}..{week_end.date()} for {len(sites)} sites")
        return schemas.SiteWeeklyView(
            week_start=week_start,
            week_end=week_end,
            sites=[
                schemas.SiteWeek(site=schemas.SiteRead.model_validate(s), shifts=shifts_by_site[s.id])
                for s in sites
            ],
        )
