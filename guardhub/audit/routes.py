"""
guardhub/audit/routes.py

Audit Log Routes
- List recent audit entries (super admin: all; company admin: own company)
"""

from fastapi import APIRouter, Query, Request, status

from guardhub.audit import schemas, services
from guardhub.core.dependencies import AdminDep, DBDep, resolve_company_scope
from guardhub.core.limiter import limiter
from guardhub.database.enums import AuditAction

router = APIRouter(prefix="/audit-logs", tags=["Audit Logs"])


@router.get(
    "",
    response_model=list[schemas.AuditLogRead],
    status_code=status.HTTP_200_OK,
    summary="List Audit Logs",
    description="Most recent 100 audit entries, optionally filtered by action and entity type.",
)
@limiter.limit("30/minute")
async def list_audit_logs(
    request: Request,
    db: DBDep,
    current_user: AdminDep,
    action: AuditAction | None = Query(None, description="Filter by action"),
    entity_type: str | None = Query(None, description="Filter by entity type"),
) -> list[schemas.AuditLogRead]:
    company_id = resolve_company_scope(current_user)
    return await services.list_audit_logs(db, company_id, action=action, entity_type=entity_type)
