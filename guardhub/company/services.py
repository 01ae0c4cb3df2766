"""
guardhub/company/services.py

Company Service Layer
Handles company administration:
- Unique company code generation
- Listing, creation, update and activation toggling (super admin)
- Own-company settings and logo upload (company admin)
- Custom billing overrides
"""

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.audit.services import record_audit
from guardhub.company import schemas
from guardhub.company.models import Company
from guardhub.core.upload import IMAGE_MIME_TYPES, MAX_LOGO_SIZE, delete_file_from_s3, upload_file_to_s3
from guardhub.core.validators import COMPANY_CODE_LENGTH
from guardhub.database.enums import AuditAction
from guardhub.utils.codes import random_base36

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 20


def generate_company_code(length: int = COMPANY_CODE_LENGTH) -> str:
    """Random upper-case base-36 code, e.g. 'K7Q2ZD'."""
    return random_base36(length)


async def generate_unique_company_code(db: AsyncSession) -> str:
    """Draws codes until one is not used by any company."""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_company_code()
        result = await db.execute(select(Company.id).filter(Company.company_code == code))
        if result.scalar_one_or_none() is None:
            return code
        logger.debug(f"[COMPANY] Company code collision on {code}, retrying")
    logger.error("[COMPANY] Could not generate a unique company code")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Could not generate a unique company code",
    )


class CompanyService:
    """Service class for company administration."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_company_or_404(self, company_id: UUID) -> Company:
        company = await self.db.get(Company, company_id)
        if not company:
            logger.warning(f"[COMPANY] Company not found: {company_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
        return company

    async def list_companies(self) -> list[Company]:
        result = await self.db.execute(select(Company).order_by(Company.name))
        return list(result.scalars().all())

    async def create_company(self, actor_id: UUID, payload: schemas.CompanyCreate) -> Company:
        code = await generate_unique_company_code(self.db)
        company = Company(**payload.model_dump(), company_code=code, is_active=True)
        self.db.add(company)
        await self.db.flush()
        record_audit(
            self.db,
            actor_id,
            AuditAction.CREATE,
            "company",
            company.id,
            {"name": company.name, "company_code": code},
        )
        await self.db.commit()
        await self.db.refresh(company)
        logger.info(f"[COMPANY] Created company {company.id} ({company.name}) code={code}")
        return company

    async def update_company(
        self,
        actor_id: UUID,
        company_id: UUID,
        payload: schemas.CompanyUpdate | schemas.CompanySettingsUpdate,
    ) -> Company:
        company = await self.get_company_or_404(company_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(company, field, value)
        record_audit(self.db, actor_id, AuditAction.UPDATE, "company", company.id, changes)
        await self.db.commit()
        await self.db.refresh(company)
        logger.info(f"[COMPANY] Updated company {company.id}: {list(changes)}")
        return company

    async def toggle_company_status(self, actor_id: UUID, company_id: UUID) -> Company:
        company = await self.get_company_or_404(company_id)
        company.is_active = not company.is_active
        record_audit(
            self.db,
            actor_id,
            AuditAction.UPDATE,
            "company",
            company.id,
            {"is_active": company.is_active},
        )
        await self.db.commit()
        await self.db.refresh(company)
        logger.info(f"[COMPANY] Company {company.id} is_active={company.is_active}")
        return company

    async def update_billing_overrides(
        self, actor_id: UUID, company_id: UUID, payload: schemas.CompanyBillingUpdate
    ) -> Company:
        company = await self.get_company_or_404(company_id)
        company.custom_license_fee = (
            Decimal(str(payload.custom_license_fee)) if payload.custom_license_fee is not None else None
        )
        company.custom_per_guard_fee = (
            Decimal(str(payload.custom_per_guard_fee))
            if payload.custom_per_guard_fee is not None
            else None
        )
        record_audit(
            self.db, actor_id, AuditAction.UPDATE, "company", company.id, payload.model_dump()
        )
        await self.db.commit()
        await self.db.refresh(company)
        logger.info(f"[COMPANY] Billing overrides updated for {company.id}")
        return company

    async def upload_logo(self, actor_id: UUID, company_id: UUID, file: UploadFile) -> Company:
        """Stores an image (< 2MB) as the company logo and replaces the previous one."""
        company = await self.get_company_or_404(company_id)
        old_logo = company.logo_url
        company.logo_url = await upload_file_to_s3(
            file,
            f"logos/{company.id}",
            allowed_mime_types=IMAGE_MIME_TYPES,
            max_size=MAX_LOGO_SIZE,
        )
        record_audit(
            self.db, actor_id, AuditAction.UPDATE, "company", company.id, {"logo_url": company.logo_url}
        )
        await self.db.commit()
        await self.db.refresh(company)
        if old_logo and old_logo != company.logo_url:
            delete_file_from_s3(old_logo)
        logger.info(f"[COMPANY] Logo updated for {company.id}")
        return company
