"""
incident/services.py

Incident Service Layer
- Reporting (any authenticated profile) and media attachments
- Role-scoped listing with status / severity filters
- Status changes by supervisors
"""

import logging
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.core.dependencies import resolve_company_scope
from guardhub.core.upload import MEDIA_MIME_TYPES, upload_file_to_s3
from guardhub.database.enums import AuditAction, UserRole
from guardhub.database.models import Profile
from guardhub.incident import schemas
from guardhub.incident.models import Incident, IncidentSeverity, IncidentStatus
from guardhub.site.models import Site

logger = logging.getLogger(__name__)


def to_incident_read(incident: Incident) -> schemas.IncidentRead:
    return schemas.IncidentRead(
        id=incident.id,
        site_id=incident.site_id,
        site_name=incident.site.name if incident.site else None,
        reported_by=incident.reported_by,
        reporter_name=incident.reporter.full_name if incident.reporter else None,
        shift_id=incident.shift_id,
        title=incident.title,
        description=incident.description,
        severity=incident.severity,
        status=incident.status,
        occurred_at=incident.occurred_at,
        latitude=incident.latitude,
        longitude=incident.longitude,
        media_urls=list(incident.media_urls or []),
        created_at=incident.created_at,
    )


class IncidentService:
    """Service class for incidents."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_incident(self, incident_id: UUID) -> Incident:
        result = await self.db.execute(
            select(Incident)
            .options(selectinload(Incident.site), selectinload(Incident.reporter))
            .filter(Incident.id == incident_id)
            .execution_options(populate_existing=True)
        )
        incident = result.scalar_one_or_none()
        if not incident:
            logger.warning(f"[INCIDENT] Incident not found: {incident_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
        return incident

    async def _get_incident_in_scope(self, user: Profile, incident_id: UUID) -> Incident:
        incident = await self._get_incident(incident_id)
        if user.role == UserRole.SECURITY_OFFICER:
            if incident.reported_by != user.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN, detail="You do not have access to this incident"
                )
        else:
            resolve_company_scope(user, incident.site.company_id)
        return incident

    async def create_incident(self, user: Profile, payload: schemas.IncidentCreate) -> schemas.IncidentRead:
        site = await self.db.get(Site, payload.site_id)
        if not site:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
        resolve_company_scope(user, site.company_id)

        incident = Incident(
            **payload.model_dump(),
            reported_by=user.id,
            status=IncidentStatus.OPEN,
        )
        self.db.add(incident)
        await self.db.flush()
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "incident",
            incident.id,
            {"title": incident.title, "severity": incident.severity.value},
        )
        await self.db.commit()
        logger.info(
            f"[INCIDENT] {incident.severity.value} incident {incident.id} reported at site {site.id} by {user.id}"
        )
        return to_incident_read(await self._get_incident(incident.id))

    async def attach_media(self, user: Profile, incident_id: UUID, file: UploadFile) -> schemas.IncidentRead:
        incident = await self._get_incident_in_scope(user, incident_id)
        url = await upload_file_to_s3(
            file,
            f"incident-media/{incident.site.company_id}/{incident.id}",
            allowed_mime_types=MEDIA_MIME_TYPES,
        )
        # ARRAY columns are not mutation-tracked; assign a new list
        incident.media_urls = [*(incident.media_urls or []), url]
        await self.db.commit()
        logger.info(f"[INCIDENT] Media attached to incident {incident.id}: {url}")
        return to_incident_read(await self._get_incident(incident.id))

    async def list_incidents(
        self,
        user: Profile,
        status_filter: IncidentStatus | None = None,
        severity: IncidentSeverity | None = None,
        company_id: UUID | None = None,
    ) -> list[schemas.IncidentRead]:
        stmt = select(Incident).options(selectinload(Incident.site), selectinload(Incident.reporter))
        if user.role == UserRole.SECURITY_OFFICER:
            stmt = stmt.filter(Incident.reported_by == user.id)
        else:
            scope = resolve_company_scope(user, company_id)
            if scope is not None:
                stmt = stmt.join(Site, Incident.site_id == Site.id).filter(Site.company_id == scope)
        if status_filter is not None:
            stmt = stmt.filter(Incident.status == status_filter)
        if severity is not None:
            stmt = stmt.filter(Incident.severity == severity)
        stmt = stmt.order_by(Incident.created_at.desc())

        result = await self.db.execute(stmt)
        return [to_incident_read(i) for i in result.scalars().all()]

    async def update_status(
        self, user: Profile, incident_id: UUID, payload: schemas.IncidentStatusUpdate
    ) -> schemas.IncidentRead:
        incident = await self._get_incident_in_scope(user, incident_id)
        previous = incident.status
        incident.status = payload.status
        record_audit(
            self.db,
            user.id,
            AuditAction.UPDATE,
            "incident",
            incident.id,
            {"status": payload.status.value, "previous": previous.value},
        )
        await self.db.commit()
        logger.info(f"[INCIDENT] Incident {incident.id} status {previous.value} -> {payload.status.value}")
        return to_incident_read(await self._get_incident(incident.id))
