"""
billing/schemas.py

Schemas for platform billing:
- Default fee settings
- Per-company overview and platform totals
- Invoices
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from guardhub.billing.models import InvoiceStatus


class BillingSettingsUpdate(BaseModel):
    license_fee: Decimal = Field(..., ge=0, decimal_places=2, description="Monthly license fee")
    per_guard_fee: Decimal = Field(..., ge=0, decimal_places=2, description="Monthly fee per guard")


class BillingSettingsRead(BillingSettingsUpdate):
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CompanyBillingRow(BaseModel):
    company_id: UUID
    company_name: str
    is_active: bool
    guard_count: int
    license_fee: Decimal
    per_guard_fee: Decimal
    total: Decimal
    uses_custom_pricing: bool = False
    last_invoice_date: datetime | None = None
    last_invoice_status: InvoiceStatus | None = None


class BillingTotals(BaseModel):
    total_revenue: Decimal = Field(..., description="Sum of totals over active companies")
    total_guards: int
    active_companies: int


class BillingOverview(BaseModel):
    settings: BillingSettingsRead
    companies: list[CompanyBillingRow]
    totals: BillingTotals


class InvoiceGenerate(BaseModel):
    company_id: UUID
    due_date: date | None = Field(None, description="Defaults to 30 days from today")
    billing_period_start: date | None = None
    billing_period_end: date | None = None

    @model_validator(mode="after")
    def period_order(self) -> "InvoiceGenerate":
        if (
            self.billing_period_start
            and self.billing_period_end
            and self.billing_period_end < self.billing_period_start
        ):
            raise ValueError("Billing period end must not precede its start")
        return self


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceRead(BaseModel):
    id: UUID
    company_id: UUID
    company_name: str | None = None
    invoice_number: str
    amount: Decimal
    currency: str
    guard_count: int
    status: InvoiceStatus
    due_date: date
    billing_period_start: date | None = None
    billing_period_end: date | None = None
    paid_at: datetime | None = None
    created_at: datetime
