"""
billing/services.py

Billing Service Layer
- Default fee settings (singleton row)
- Per-company charges: license + guards * per-guard fee, honouring custom overrides
- Platform totals over active companies
- Invoice generation, listing and status changes
"""

import logging
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.billing import schemas
from guardhub.billing.models import (
    DEFAULT_LICENSE_FEE,
    DEFAULT_PER_GUARD_FEE,
    BillingSettings,
    Invoice,
    InvoiceStatus,
)
from guardhub.company.models import Company
from guardhub.database.enums import AuditAction, UserRole
from guardhub.database.models import Profile
from guardhub.utils.dates import epoch_ms, utcnow

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1
INVOICE_DUE_DAYS = 30
CENTS = Decimal("0.01")


# ---------------------------------------------------
# Billing Math
# ---------------------------------------------------
def compute_company_charge(
    guard_count: int,
    default_license_fee: Decimal,
    default_per_guard_fee: Decimal,
    custom_license_fee: Decimal | None = None,
    custom_per_guard_fee: Decimal | None = None,
) -> tuple[Decimal, Decimal, Decimal]:
    """
    Returns (license_fee, per_guard_fee, total) for one company.
    A custom fee replaces the default only when it is set.
    """
    license_fee = Decimal(custom_license_fee if custom_license_fee is not None else default_license_fee)
    per_guard_fee = Decimal(
        custom_per_guard_fee if custom_per_guard_fee is not None else default_per_guard_fee
    )
    total = (license_fee + per_guard_fee * guard_count).quantize(CENTS)
    return license_fee.quantize(CENTS), per_guard_fee.quantize(CENTS), total


def compute_totals(rows: Iterable[schemas.CompanyBillingRow]) -> schemas.BillingTotals:
    """Revenue comes from active companies only; guards are counted across every company."""
    all_rows = list(rows)
    active = [row for row in all_rows if row.is_active]
    return schemas.BillingTotals(
        total_revenue=sum((row.total for row in active), Decimal("0.00")),
        total_guards=sum(row.guard_count for row in all_rows),
        active_companies=len(active),
    )


def generate_invoice_number() -> str:
    return f"INV-{epoch_ms()}"


def to_invoice_read(invoice: Invoice) -> schemas.InvoiceRead:
    return schemas.InvoiceRead(
        id=invoice.id,
        company_id=invoice.company_id,
        company_name=invoice.company.name if invoice.company else None,
        invoice_number=invoice.invoice_number,
        amount=invoice.amount,
        currency=invoice.currency,
        guard_count=invoice.guard_count,
        status=invoice.status,
        due_date=invoice.due_date,
        billing_period_start=invoice.billing_period_start,
        billing_period_end=invoice.billing_period_end,
        paid_at=invoice.paid_at,
        created_at=invoice.created_at,
    )


class BillingService:
    """Service class for platform billing."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Settings
    # ---------------------------------------------------
    async def get_settings(self) -> BillingSettings:
        settings_row = await self.db.get(BillingSettings, SETTINGS_ROW_ID)
        if settings_row is None:
            settings_row = BillingSettings(
                id=SETTINGS_ROW_ID,
                license_fee=DEFAULT_LICENSE_FEE,
                per_guard_fee=DEFAULT_PER_GUARD_FEE,
            )
            self.db.add(settings_row)
            await self.db.commit()
            await self.db.refresh(settings_row)
            logger.info("[BILLING] Created default billing settings row")
        return settings_row

    async def update_settings(
        self, user: Profile, payload: schemas.BillingSettingsUpdate
    ) -> BillingSettings:
        settings_row = await self.get_settings()
        settings_row.license_fee = payload.license_fee
        settings_row.per_guard_fee = payload.per_guard_fee
        record_audit(self.db, user.id, AuditAction.UPDATE, "billing_settings", None, payload.model_dump())
        await self.db.commit()
        await self.db.refresh(settings_row)
        logger.info(
            f"[BILLING] Default fees set to license={payload.license_fee} per_guard={payload.per_guard_fee}"
        )
        return settings_row

    # ---------------------------------------------------
    # Overview
    # ---------------------------------------------------
    async def _guard_counts(self) -> dict[UUID, int]:
        result = await self.db.execute(
            select(Profile.company_id, func.count(Profile.id))
            .filter(Profile.role == UserRole.SECURITY_OFFICER, Profile.company_id.is_not(None))
            .group_by(Profile.company_id)
        )
        return {company_id: count for company_id, count in result.all()}

    async def _last_invoices(self) -> dict[UUID, Invoice]:
        result = await self.db.execute(select(Invoice).order_by(Invoice.created_at.desc()))
        latest: dict[UUID, Invoice] = {}
        for invoice in result.scalars().all():
            latest.setdefault(invoice.company_id, invoice)
        return latest

    def _billing_row(
        self,
        company: Company,
        guard_count: int,
        settings_row: BillingSettings,
        last_invoice: Invoice | None,
    ) -> schemas.CompanyBillingRow:
        license_fee, per_guard_fee, total = compute_company_charge(
            guard_count,
            settings_row.license_fee,
            settings_row.per_guard_fee,
            company.custom_license_fee,
            company.custom_per_guard_fee,
        )
        return schemas.CompanyBillingRow(
            company_id=company.id,
            company_name=company.name,
            is_active=company.is_active,
            guard_count=guard_count,
            license_fee=license_fee,
            per_guard_fee=per_guard_fee,
            total=total,
            uses_custom_pricing=(
                company.custom_license_fee is not None or company.custom_per_guard_fee is not None
            ),
            last_invoice_date=last_invoice.created_at if last_invoice else None,
            last_invoice_status=last_invoice.status if last_invoice else None,
        )

    async def overview(self) -> schemas.BillingOverview:
        settings_row = await self.get_settings()
        companies = (await self.db.execute(select(Company).order_by(Company.name))).scalars().all()
        counts = await self._guard_counts()
        last_invoices = await self._last_invoices()

        rows = [
            self._billing_row(c, counts.get(c.id, 0), settings_row, last_invoices.get(c.id))
            for c in companies
        ]
        totals = compute_totals(rows)
        logger.info(
            f"[BILLING] Overview: {totals.active_companies} active companies, revenue={totals.total_revenue}"
        )
        return schemas.BillingOverview(
            settings=schemas.BillingSettingsRead.model_validate(settings_row),
            companies=rows,
            totals=totals,
        )

    # ---------------------------------------------------
    # Invoices
    # ---------------------------------------------------
    async def _get_invoice(self, invoice_id: UUID) -> Invoice:
        result = await self.db.execute(
            select(Invoice)
            .options(selectinload(Invoice.company))
            .filter(Invoice.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        invoice = result.scalar_one_or_none()
        if not invoice:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
        return invoice

    async def generate_invoice(self, user: Profile, payload: schemas.InvoiceGenerate) -> schemas.InvoiceRead:
        company = await self.db.get(Company, payload.company_id)
        if not company:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

        settings_row = await self.get_settings()
        guard_count = (await self._guard_counts()).get(company.id, 0)
        row = self._billing_row(company, guard_count, settings_row, None)

        invoice = Invoice(
            company_id=company.id,
            invoice_number=generate_invoice_number(),
            amount=row.total,
            currency="USD",
            guard_count=guard_count,
            status=InvoiceStatus.PENDING,
            due_date=payload.due_date or date.today() + timedelta(days=INVOICE_DUE_DAYS),
            billing_period_start=payload.billing_period_start,
            billing_period_end=payload.billing_period_end,
        )
        self.db.add(invoice)
        await self.db.flush()
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "invoice",
            invoice.id,
            {"invoice_number": invoice.invoice_number, "amount": row.total, "company_id": company.id},
        )
        await self.db.commit()
        logger.info(f"[BILLING] Invoice {invoice.invoice_number} ({row.total} USD) issued to {company.id}")
        return to_invoice_read(await self._get_invoice(invoice.id))

    async def list_invoices(self, company_id: UUID | None = None) -> list[schemas.InvoiceRead]:
        stmt = select(Invoice).options(selectinload(Invoice.company)).order_by(Invoice.created_at.desc())
        if company_id is not None:
            stmt = stmt.filter(Invoice.company_id == company_id)
        result = await self.db.execute(stmt)
        return [to_invoice_read(i) for i in result.scalars().all()]

    async def update_invoice_status(
        self, user: Profile, invoice_id: UUID, payload: schemas.InvoiceStatusUpdate
    ) -> schemas.InvoiceRead:
        invoice = await self._get_invoice(invoice_id)
        invoice.status = payload.status
        invoice.paid_at = utcnow() if payload.status == InvoiceStatus.PAID else None
        record_audit(
            self.db, user.id, AuditAction.UPDATE, "invoice", invoice.id, {"status": payload.status.value}
        )
        await self.db.commit()
        logger.info(f"[BILLING] Invoice {invoice.invoice_number} -> {payload.status.value}")
        return to_invoice_read(await self._get_invoice(invoice.id))
