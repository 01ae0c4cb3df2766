"""
equipment/services.py

Equipment Service Layer
- Company-scoped inventory CRUD
- Holder assignment drives the assigned / available status
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile
from guardhub.equipment import schemas
from guardhub.equipment.models import Equipment, EquipmentStatus
from guardhub.site.models import Site

logger = logging.getLogger(__name__)


def status_after_assignment(
    current: EquipmentStatus, holder: UUID | None, requested: EquipmentStatus | None = None
) -> EquipmentStatus:
    """
    An item with a holder is `assigned`; an assigned item without one
    falls back to `available`. Otherwise the requested (or current) status stands.
    """
    if holder is not None:
        return EquipmentStatus.ASSIGNED
    effective = requested or current
    if effective == EquipmentStatus.ASSIGNED:
        return EquipmentStatus.AVAILABLE
    return effective


def to_equipment_read(item: Equipment) -> schemas.EquipmentRead:
    return schemas.EquipmentRead(
        id=item.id,
        company_id=item.company_id,
        name=item.name,
        type=item.type,
        description=item.description,
        serial_number=item.serial_number,
        status=item.status,
        assigned_to=item.assigned_to,
        holder_name=item.holder.full_name if item.holder else None,
        site_id=item.site_id,
        site_name=item.site.name if item.site else None,
        purchase_date=item.purchase_date,
        last_maintenance_date=item.last_maintenance_date,
        created_at=item.created_at,
    )


class EquipmentService:
    """Service class for equipment inventory."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_item(self, item_id: UUID) -> Equipment:
        result = await self.db.execute(
            select(Equipment)
            .options(selectinload(Equipment.site), selectinload(Equipment.holder))
            .filter(Equipment.id == item_id)
            .execution_options(populate_existing=True)
        )
        item = result.scalar_one_or_none()
        if not item:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Equipment not found")
        return item

    async def _get_item_in_scope(self, user: Profile, item_id: UUID) -> Equipment:
        item = await self._get_item(item_id)
        resolve_company_scope(user, item.company_id)
        return item

    async def _check_references(self, company_id: UUID, holder_id: UUID | None, site_id: UUID | None) -> None:
        """Holder and site must belong to the item's company."""
        if holder_id is not None:
            holder = await self.db.get(Profile, holder_id)
            if not holder or holder.company_id != company_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Holder does not belong to this company"
                )
        if site_id is not None:
            site = await self.db.get(Site, site_id)
            if not site or site.company_id != company_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Site does not belong to this company"
                )

    async def list_equipment(
        self, user: Profile, company_id: UUID | None = None
    ) -> list[schemas.EquipmentRead]:
        scope = resolve_company_scope(user, company_id)
        stmt = (
            select(Equipment)
            .options(selectinload(Equipment.site), selectinload(Equipment.holder))
            .order_by(Equipment.created_at.desc())
        )
        if scope is not None:
            stmt = stmt.filter(Equipment.company_id == scope)
        result = await self.db.execute(stmt)
        return [to_equipment_read(i) for i in result.scalars().all()]

    async def create_equipment(self, user: Profile, payload: schemas.EquipmentCreate) -> schemas.EquipmentRead:
        company_id = resolve_company_scope(user, payload.company_id)
        if company_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="company_id is required")
        await self._check_references(company_id, payload.assigned_to, payload.site_id)

        data = payload.model_dump(exclude={"company_id"})
        data["status"] = status_after_assignment(payload.status, payload.assigned_to)
        item = Equipment(**data, company_id=company_id)
        self.db.add(item)
        await self.db.flush()
        record_audit(
            self.db, user.id, AuditAction.CREATE, "equipment", item.id, {"name": item.name, "type": item.type.value}
        )
        await self.db.commit()
        logger.info(f"[EQUIPMENT] Created {item.type.value} {item.id} for company {company_id}")
        return to_equipment_read(await self._get_item(item.id))

    async def update_equipment(
        self, user: Profile, item_id: UUID, payload: schemas.EquipmentUpdate
    ) -> schemas.EquipmentRead:
        item = await self._get_item_in_scope(user, item_id)
        changes = payload.model_dump(exclude_unset=True)
        await self._check_references(item.company_id, changes.get("assigned_to"), changes.get("site_id"))

        for field, value in changes.items():
            setattr(item, field, value)
        if "assigned_to" in changes:
            item.status = status_after_assignment(item.status, item.assigned_to, changes.get("status"))

        record_audit(self.db, user.id, AuditAction.UPDATE, "equipment", item.id, changes)
        await self.db.commit()
        logger.info(f"[EQUIPMENT] Updated {item.id}: {list(changes)} status={item.status.value}")
        return to_equipment_read(await self._get_item(item.id))

    async def delete_equipment(self, user: Profile, item_id: UUID) -> None:
        item = await self._get_item_in_scope(user, item_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "equipment", item.id, {"name": item.name})
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"[EQUIPMENT] Deleted {item_id}")
