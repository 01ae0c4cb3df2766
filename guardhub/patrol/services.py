"""
patrol/services.py

Patrol Service Layer
- Patrol routes per site (company scoped)
- Ordered QR checkpoints with generated payloads
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile
from guardhub.patrol import schemas
from guardhub.patrol.models import Checkpoint, PatrolRoute
from guardhub.patrol.qr import generate_checkpoint_code, render_qr_png
from guardhub.site.models import Site

logger = logging.getLogger(__name__)


def to_route_read(route: PatrolRoute) -> schemas.PatrolRouteRead:
    return schemas.PatrolRouteRead(
        id=route.id,
        company_id=route.company_id,
        site_id=route.site_id,
        site_name=route.site.name if route.site else None,
        name=route.name,
        is_active=route.is_active,
        checkpoint_count=len(route.checkpoints),
        created_at=route.created_at,
    )


class PatrolService:
    """Service class for patrol routes and checkpoints."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Helpers
    # ---------------------------------------------------
    async def _get_route_in_scope(self, user: Profile, route_id: UUID) -> PatrolRoute:
        result = await self.db.execute(
            select(PatrolRoute)
            .options(selectinload(PatrolRoute.site), selectinload(PatrolRoute.checkpoints))
            .filter(PatrolRoute.id == route_id)
            .execution_options(populate_existing=True)
        )
        route = result.scalar_one_or_none()
        if not route:
            logger.warning(f"[PATROL] Route not found: {route_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patrol route not found")
        resolve_company_scope(user, route.company_id)
        return route

    async def _get_checkpoint_in_scope(self, user: Profile, checkpoint_id: UUID) -> Checkpoint:
        result = await self.db.execute(
            select(Checkpoint)
            .options(selectinload(Checkpoint.route))
            .filter(Checkpoint.id == checkpoint_id)
        )
        checkpoint = result.scalar_one_or_none()
        if not checkpoint:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Checkpoint not found")
        resolve_company_scope(user, checkpoint.route.company_id)
        return checkpoint

    async def _next_order_index(self, route_id: UUID) -> int:
        result = await self.db.execute(
            select(func.max(Checkpoint.order_index)).filter(Checkpoint.route_id == route_id)
        )
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    # ---------------------------------------------------
    # Routes
    # ---------------------------------------------------
    async def list_routes(
        self, user: Profile, site_id: UUID | None = None, company_id: UUID | None = None
    ) -> list[schemas.PatrolRouteRead]:
        scope = resolve_company_scope(user, company_id)
        stmt = (
            select(PatrolRoute)
            .options(selectinload(PatrolRoute.site), selectinload(PatrolRoute.checkpoints))
            .order_by(PatrolRoute.created_at.desc())
        )
        if scope is not None:
            stmt = stmt.filter(PatrolRoute.company_id == scope)
        if site_id is not None:
            stmt = stmt.filter(PatrolRoute.site_id == site_id)
        result = await self.db.execute(stmt)
        return [to_route_read(r) for r in result.scalars().all()]

    async def create_route(self, user: Profile, payload: schemas.PatrolRouteCreate) -> schemas.PatrolRouteRead:
        site = await self.db.get(Site, payload.site_id)
        if not site:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
        resolve_company_scope(user, site.company_id)

        route = PatrolRoute(name=payload.name, site_id=site.id, company_id=site.company_id, is_active=True)
        self.db.add(route)
        await self.db.flush()

        for index, draft in enumerate(payload.checkpoints):
            self.db.add(
                Checkpoint(
                    **draft.model_dump(),
                    route_id=route.id,
                    order_index=index,
                    qr_code=generate_checkpoint_code(),
                )
            )

        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "patrol_route",
            route.id,
            {"name": route.name, "checkpoints": len(payload.checkpoints)},
        )
        await self.db.commit()
        logger.info(
            f"[PATROL] Created route {route.id} at site {site.id} with {len(payload.checkpoints)} checkpoints"
        )
        return to_route_read(await self._get_route_in_scope(user, route.id))

    async def update_route(
        self, user: Profile, route_id: UUID, payload: schemas.PatrolRouteUpdate
    ) -> schemas.PatrolRouteRead:
        route = await self._get_route_in_scope(user, route_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(route, field, value)
        record_audit(self.db, user.id, AuditAction.UPDATE, "patrol_route", route.id, changes)
        await self.db.commit()
        return to_route_read(await self._get_route_in_scope(user, route.id))

    async def delete_route(self, user: Profile, route_id: UUID) -> None:
        route = await self._get_route_in_scope(user, route_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "patrol_route", route.id, {"name": route.name})
        await self.db.delete(route)
        await self.db.commit()
        logger.info(f"[PATROL] Deleted route {route_id} and its checkpoints")

    # ---------------------------------------------------
    # Checkpoints
    # ---------------------------------------------------
    async def list_checkpoints(self, user: Profile, route_id: UUID) -> list[Checkpoint]:
        route = await self._get_route_in_scope(user, route_id)
        return list(route.checkpoints)

    async def add_checkpoint(
        self, user: Profile, route_id: UUID, payload: schemas.CheckpointCreate
    ) -> Checkpoint:
        route = await self._get_route_in_scope(user, route_id)
        order_index = payload.order_index
        if order_index is None:
            order_index = await self._next_order_index(route.id)

        checkpoint = Checkpoint(
            **payload.model_dump(exclude={"order_index"}),
            route_id=route.id,
            order_index=order_index,
            qr_code=generate_checkpoint_code(),
        )
        self.db.add(checkpoint)
        await self.db.flush()
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "checkpoint",
            checkpoint.id,
            {"name": checkpoint.name, "qr_code": checkpoint.qr_code},
        )
        await self.db.commit()
        await self.db.refresh(checkpoint)
        logger.info(f"[PATROL] Checkpoint {checkpoint.id} added to route {route.id} ({checkpoint.qr_code})")
        return checkpoint

    async def update_checkpoint(
        self, user: Profile, checkpoint_id: UUID, payload: schemas.CheckpointUpdate
    ) -> Checkpoint:
        checkpoint = await self._get_checkpoint_in_scope(user, checkpoint_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(checkpoint, field, value)
        record_audit(self.db, user.id, AuditAction.UPDATE, "checkpoint", checkpoint.id, changes)
        await self.db.commit()
        await self.db.refresh(checkpoint)
        return checkpoint

    async def delete_checkpoint(self, user: Profile, checkpoint_id: UUID) -> None:
        checkpoint = await self._get_checkpoint_in_scope(user, checkpoint_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "checkpoint", checkpoint.id)
        await self.db.delete(checkpoint)
        await self.db.commit()
        logger.info(f"[PATROL] Deleted checkpoint {checkpoint_id}")

    async def checkpoint_qr_png(self, user: Profile, checkpoint_id: UUID) -> bytes:
        checkpoint = await self._get_checkpoint_in_scope(user, checkpoint_id)
        return render_qr_png(checkpoint.qr_code)
