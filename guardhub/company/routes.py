"""
guardhub/company/routes.py

Company Routes
- Super admin: list, create, update, toggle status, billing overrides, logo
- Company admin: read/update own company settings and logo
"""

from uuid import UUID

from fastapi import APIRouter, File, Request, UploadFile, status

from guardhub.company import schemas
from guardhub.company.services import CompanyService
from guardhub.core.dependencies import (
    CompanyAdminDep,
    DBDep,
    ManagementDep,
    SuperAdminDep,
    resolve_company_scope,
)
from guardhub.core.limiter import limiter

router = APIRouter(prefix="/companies", tags=["Companies"])


# ---------------------------------------------------
# Own Company (Company Admin / Site Manager)
# ---------------------------------------------------
@router.get(
    "/me",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Get My Company",
)
@limiter.limit("30/minute")
async def get_my_company(request: Request, db: DBDep, current_user: ManagementDep) -> schemas.CompanyRead:
    company_id = resolve_company_scope(current_user)
    company = await CompanyService(db).get_company_or_404(company_id)
    return schemas.CompanyRead.model_validate(company)


@router.put(
    "/me",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Update My Company Settings",
)
@limiter.limit("10/minute")
async def update_my_company(
    request: Request,
    payload: schemas.CompanySettingsUpdate,
    db: DBDep,
    current_user: CompanyAdminDep,
) -> schemas.CompanyRead:
    company = await CompanyService(db).update_company(current_user.id, current_user.company_id, payload)
    return schemas.CompanyRead.model_validate(company)


@router.post(
    "/me/logo",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Upload My Company Logo",
    description="Image files only, less than 2MB.",
)
@limiter.limit("5/minute")
async def upload_my_logo(
    request: Request,
    db: DBDep,
    current_user: CompanyAdminDep,
    file: UploadFile = File(...),
) -> schemas.CompanyRead:
    company = await CompanyService(db).upload_logo(current_user.id, current_user.company_id, file)
    return schemas.CompanyRead.model_validate(company)


# ---------------------------------------------------
# Platform Administration (Super Admin)
# ---------------------------------------------------
@router.get(
    "",
    response_model=list[schemas.CompanyRead],
    status_code=status.HTTP_200_OK,
    summary="List Companies",
)
@limiter.limit("30/minute")
async def list_companies(request: Request, db: DBDep, current_user: SuperAdminDep) -> list[schemas.CompanyRead]:
    companies = await CompanyService(db).list_companies()
    return [schemas.CompanyRead.model_validate(c) for c in companies]


@router.post(
    "",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company",
    description="Creates a company with a freshly generated unique company code.",
)
@limiter.limit("10/minute")
async def create_company(
    request: Request, payload: schemas.CompanyCreate, db: DBDep, current_user: SuperAdminDep
) -> schemas.CompanyRead:
    company = await CompanyService(db).create_company(current_user.id, payload)
    return schemas.CompanyRead.model_validate(company)


@router.put(
    "/{company_id}",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Update Company",
)
@limiter.limit("10/minute")
async def update_company(
    request: Request,
    company_id: UUID,
    payload: schemas.CompanyUpdate,
    db: DBDep,
    current_user: SuperAdminDep,
) -> schemas.CompanyRead:
    company = await CompanyService(db).update_company(current_user.id, company_id, payload)
    return schemas.CompanyRead.model_validate(company)


@router.patch(
    "/{company_id}/toggle-status",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Activate / Deactivate Company",
)
@limiter.limit("10/minute")
async def toggle_company_status(
    request: Request, company_id: UUID, db: DBDep, current_user: SuperAdminDep
) -> schemas.CompanyRead:
    company = await CompanyService(db).toggle_company_status(current_user.id, company_id)
    return schemas.CompanyRead.model_validate(company)


@router.put(
    "/{company_id}/billing",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Set Custom Billing Fees",
)
@limiter.limit("10/minute")
async def update_company_billing(
    request: Request,
    company_id: UUID,
    payload: schemas.CompanyBillingUpdate,
    db: DBDep,
    current_user: SuperAdminDep,
) -> schemas.CompanyRead:
    company = await CompanyService(db).update_billing_overrides(current_user.id, company_id, payload)
    return schemas.CompanyRead.model_validate(company)


@router.post(
    "/{company_id}/logo",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Upload Company Logo",
)
@limiter.limit("5/minute")
async def upload_company_logo(
    request: Request,
    company_id: UUID,
    db: DBDep,
    current_user: SuperAdminDep,
    file: UploadFile = File(...),
) -> schemas.CompanyRead:
    company = await CompanyService(db).upload_logo(current_user.id, company_id, file)
    return schemas.CompanyRead.model_validate(company)
