"""
billing/routes.py

Billing Routes
- Default fee settings (super admin)
- Company billing overview and totals (super admin)
- Invoices: generate, list, update status
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.billing import schemas
from guardhub.billing.services import BillingService
from guardhub.core.dependencies import AdminDep, DBDep, SuperAdminDep, resolve_company_scope
from guardhub.core.limiter import limiter

router = APIRouter(prefix="/billing", tags=["Billing"])


# ---------------------------------------------------
# Settings
# ---------------------------------------------------
@router.get(
    "/settings",
    response_model=schemas.BillingSettingsRead,
    status_code=status.HTTP_200_OK,
    summary="Get Billing Settings",
)
@limiter.limit("30/minute")
async def get_billing_settings(request: Request, db: DBDep, current_user: SuperAdminDep) -> schemas.BillingSettingsRead:
    settings_row = await BillingService(db).get_settings()
    return schemas.BillingSettingsRead.model_validate(settings_row)


@router.put(
    "/settings",
    response_model=schemas.BillingSettingsRead,
    status_code=status.HTTP_200_OK,
    summary="Update Billing Settings",
)
@limiter.limit("10/minute")
async def update_billing_settings(
    request: Request, payload: schemas.BillingSettingsUpdate, db: DBDep, current_user: SuperAdminDep
) -> schemas.BillingSettingsRead:
    settings_row = await BillingService(db).update_settings(current_user, payload)
    return schemas.BillingSettingsRead.model_validate(settings_row)


# ---------------------------------------------------
# Overview
# ---------------------------------------------------
@router.get(
    "/overview",
    response_model=schemas.BillingOverview,
    status_code=status.HTTP_200_OK,
    summary="Company Billing Overview",
    description="Per-company charges (license + guards x per-guard fee) and platform totals.",
)
@limiter.limit("30/minute")
async def billing_overview(request: Request, db: DBDep, current_user: SuperAdminDep) -> schemas.BillingOverview:
    return await BillingService(db).overview()


# ---------------------------------------------------
# Invoices
# ---------------------------------------------------
@router.post(
    "/invoices",
    response_model=schemas.InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Generate Invoice",
)
@limiter.limit("20/minute")
async def generate_invoice(
    request: Request, payload: schemas.InvoiceGenerate, db: DBDep, current_user: SuperAdminDep
) -> schemas.InvoiceRead:
    return await BillingService(db).generate_invoice(current_user, payload)


@router.get(
    "/invoices",
    response_model=list[schemas.InvoiceRead],
    status_code=status.HTTP_200_OK,
    summary="List Invoices",
    description="Super admins see all invoices (optionally per company); company admins see their own.",
)
@limiter.limit("30/minute")
async def list_invoices(
    request: Request,
    db: DBDep,
    current_user: AdminDep,
    company_id: UUID | None = Query(None),
) -> list[schemas.InvoiceRead]:
    scope = resolve_company_scope(current_user, company_id)
    return await BillingService(db).list_invoices(scope)


@router.patch(
    "/invoices/{invoice_id}/status",
    response_model=schemas.InvoiceRead,
    status_code=status.HTTP_200_OK,
    summary="Update Invoice Status",
)
@limiter.limit("20/minute")
async def update_invoice_status(
    request: Request,
    invoice_id: UUID,
    payload: schemas.InvoiceStatusUpdate,
    db: DBDep,
    current_user: SuperAdminDep,
) -> schemas.InvoiceRead:
    return await BillingService(db).update_invoice_status(current_user, invoice_id, payload)
