"""
lead/services.py

Lead capture from the public contact form and the super admin pipeline view.
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.audit.services import record_audit
from guardhub.core.email import send_lead_notification
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile
from guardhub.lead import schemas
from guardhub.lead.models import Lead, LeadStatus

logger = logging.getLogger(__name__)

LEAD_SOURCE = "contact_form"


class LeadService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def submit_lead(self, payload: schemas.LeadCreate) -> Lead:
        lead = Lead(**payload.model_dump(), source=LEAD_SOURCE, status=LeadStatus.NEW)
        self.db.add(lead)
        await self.db.commit()
        await self.db.refresh(lead)
        logger.info(f"[LEAD] New lead {lead.id} from {lead.email}")

        try:
            await send_lead_notification(payload.model_dump())
        except Exception as e:
            logger.error(f"[LEAD] Failed to send notification for lead {lead.id}: {e}")

        return lead

    async def list_leads(
        self,
        status_filter: LeadStatus | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Lead], int]:
        """Newest leads first, with the total count for the same filters."""
        filters = []
        if status_filter:
            filters.append(Lead.status == status_filter)
        if search:
            term = search.strip()
            # autoescape treats % and _ in the search text as literals
            filters.append(
                or_(
                    Lead.name.icontains(term, autoescape=True),
                    Lead.email.icontains(term, autoescape=True),
                    Lead.company.icontains(term, autoescape=True),
                )
            )

        total = (await self.db.execute(select(func.count(Lead.id)).filter(*filters))).scalar_one()
        result = await self.db.execute(
            select(Lead).filter(*filters).order_by(Lead.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    async def update_status(self, user: Profile, lead_id: UUID, new_status: LeadStatus) -> Lead:
        lead = await self.db.get(Lead, lead_id)
        if not lead:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lead not found")

        old_status = lead.status
        lead.status = new_status
        record_audit(
            self.db,
            user.id,
            AuditAction.UPDATE,
            "lead",
            lead.id,
            {"status": {"old": old_status.value, "new": new_status.value}},
        )
        await self.db.commit()
        await self.db.refresh(lead)
        logger.info(f"[LEAD] Lead {lead.id} moved {old_status.value} -> {new_status.value}")
        return lead
