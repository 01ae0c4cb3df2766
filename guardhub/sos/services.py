"""
sos/services.py

SOS Service Layer
- Officers raise alerts
- Supervisors acknowledge and resolve them
- Every change is pushed to the company's (and the platform's) realtime subscribers
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction, UserRole
from guardhub.database.models import Profile
from guardhub.site.models import Site
from guardhub.sos import schemas
from guardhub.sos.manager import broadcast_groups, manager
from guardhub.sos.models import SOSAlert, SOSStatus
from guardhub.utils.dates import utcnow

logger = logging.getLogger(__name__)


def to_alert_read(alert: SOSAlert) -> schemas.SOSAlertRead:
    return schemas.SOSAlertRead(
        id=alert.id,
        guard_id=alert.guard_id,
        guard_name=alert.guard.full_name if alert.guard else None,
        company_id=alert.guard.company_id if alert.guard else None,
        site_id=alert.site_id,
        site_name=alert.site.name if alert.site else None,
        shift_id=alert.shift_id,
        latitude=alert.latitude,
        longitude=alert.longitude,
        message=alert.message,
        status=alert.status,
        acknowledged_by=alert.acknowledged_by,
        acknowledged_at=alert.acknowledged_at,
        resolved_at=alert.resolved_at,
        created_at=alert.created_at,
    )


async def notify_subscribers(action: str, alert: schemas.SOSAlertRead) -> None:
    event = schemas.SOSEvent(action=action, alert=alert)
    await manager.broadcast(broadcast_groups(alert.company_id), event.model_dump(mode="json"))
    logger.debug(f"[SOS] Broadcast {action} for alert {alert.id}")


class SOSService:
    """Service class for SOS alerts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_alert(self, alert_id: UUID) -> SOSAlert:
        result = await self.db.execute(
            select(SOSAlert)
            .options(selectinload(SOSAlert.guard), selectinload(SOSAlert.site))
            .filter(SOSAlert.id == alert_id)
            .execution_options(populate_existing=True)
        )
        alert = result.scalar_one_or_none()
        if not alert:
            logger.warning(f"[SOS] Alert not found: {alert_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SOS alert not found")
        return alert

    async def _get_alert_in_scope(self, user: Profile, alert_id: UUID) -> SOSAlert:
        alert = await self._get_alert(alert_id)
        resolve_company_scope(user, alert.guard.company_id)
        return alert

    async def raise_alert(self, user: Profile, payload: schemas.SOSAlertCreate) -> schemas.SOSAlertRead:
        if payload.site_id is not None:
            site = await self.db.get(Site, payload.site_id)
            if not site:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
            resolve_company_scope(user, site.company_id)

        alert = SOSAlert(**payload.model_dump(), guard_id=user.id, status=SOSStatus.ACTIVE)
        self.db.add(alert)
        await self.db.flush()
        record_audit(self.db, user.id, AuditAction.CREATE, "sos_alert", alert.id)
        await self.db.commit()
        logger.warning(
            f"[SOS] Alert {alert.id} raised by guard {user.id} at ({alert.latitude}, {alert.longitude})"
        )

        alert_read = to_alert_read(await self._get_alert(alert.id))
        await notify_subscribers("created", alert_read)
        return alert_read

    async def list_alerts(
        self,
        user: Profile,
        status_filter: SOSStatus | None = None,
        company_id: UUID | None = None,
    ) -> list[schemas.SOSAlertRead]:
        stmt = select(SOSAlert).options(selectinload(SOSAlert.guard), selectinload(SOSAlert.site))
        if user.role == UserRole.SECURITY_OFFICER:
            stmt = stmt.filter(SOSAlert.guard_id == user.id)
        else:
            scope = resolve_company_scope(user, company_id)
            if scope is not None:
                stmt = stmt.join(Profile, SOSAlert.guard_id == Profile.id).filter(
                    Profile.company_id == scope
                )
        if status_filter is not None:
            stmt = stmt.filter(SOSAlert.status == status_filter)
        stmt = stmt.order_by(SOSAlert.created_at.desc())

        result = await self.db.execute(stmt)
        return [to_alert_read(a) for a in result.scalars().all()]

    async def acknowledge_alert(self, user: Profile, alert_id: UUID) -> schemas.SOSAlertRead:
        alert = await self._get_alert_in_scope(user, alert_id)
        if alert.status != SOSStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Only active alerts can be acknowledged (current: {alert.status.value})",
            )
        alert.status = SOSStatus.ACKNOWLEDGED
        alert.acknowledged_by = user.id
        alert.acknowledged_at = utcnow()
        record_audit(
            self.db, user.id, AuditAction.UPDATE, "sos_alert", alert.id, {"status": "acknowledged"}
        )
        await self.db.commit()
        logger.info(f"[SOS] Alert {alert.id} acknowledged by {user.id}")

        alert_read = to_alert_read(alert)
        await notify_subscribers("acknowledged", alert_read)
        return alert_read

    async def resolve_alert(self, user: Profile, alert_id: UUID) -> schemas.SOSAlertRead:
        alert = await self._get_alert_in_scope(user, alert_id)
        if alert.status == SOSStatus.RESOLVED:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Alert is already resolved")
        alert.status = SOSStatus.RESOLVED
        alert.resolved_at = utcnow()
        record_audit(
            self.db, user.id, AuditAction.UPDATE, "sos_alert", alert.id, {"status": "resolved"}
        )
        await self.db.commit()
        logger.info(f"[SOS] Alert {alert.id} resolved by {user.id}")

        alert_read = to_alert_read(alert)
        await notify_subscribers("resolved", alert_read)
        return alert_read
