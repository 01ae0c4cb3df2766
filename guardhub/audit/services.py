"""
guardhub/audit/services.py

Audit Log Service

- record_audit: stage an audit row in the caller's transaction
- list_audit_logs: newest-first listing with filters and company scoping
"""

import logging
from typing import Any
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit import schemas
from guardhub.audit.models import AuditLog
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile

logger = logging.getLogger(__name__)

AUDIT_LIST_LIMIT = 100


def record_audit(
    db: AsyncSession,
    user_id: UUID | None,
    action: AuditAction,
    entity_type: str,
    entity_id: UUID | None = None,
    changes: dict[str, Any] | None = None,
) -> AuditLog:
    """
    Adds an audit row to the session. The caller's commit persists it
    together with the change being audited. `changes` is stored as JSON
    (UUIDs, dates and decimals are encoded).
    """
    entry = AuditLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        changes=jsonable_encoder(changes) if changes is not None else None,
    )
    db.add(entry)
    logger.debug(f"[AUDIT] {action.value} {entity_type} {entity_id} by {user_id}")
    return entry


async def list_audit_logs(
    db: AsyncSession,
    company_id: UUID | None,
    action: AuditAction | None = None,
    entity_type: str | None = None,
) -> list[schemas.AuditLogRead]:
    """Last 100 entries, newest first. `company_id` restricts to that company's users."""
    stmt = select(AuditLog).options(selectinload(AuditLog.user))
    if company_id is not None:
        stmt = stmt.join(Profile, AuditLog.user_id == Profile.id).filter(
            Profile.company_id == company_id
        )
    if action is not None:
        stmt = stmt.filter(AuditLog.action == action)
    if entity_type:
        stmt = stmt.filter(AuditLog.entity_type == entity_type)
    stmt = stmt.order_by(AuditLog.created_at.desc()).limit(AUDIT_LIST_LIMIT)

    result = await db.execute(stmt)
    rows = result.scalars().all()
    logger.info(f"[AUDIT] Listed {len(rows)} entries (company={company_id})")
    return [
        schemas.AuditLogRead(
            id=row.id,
            user_id=row.user_id,
            user_name=row.user.full_name if row.user else None,
            action=row.action,
            entity_type=row.entity_type,
            entity_id=row.entity_id,
            changes=row.changes,
            created_at=row.created_at,
        )
        for row in rows
    ]
