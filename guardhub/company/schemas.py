"""
guardhub/company/schemas.py

Company Schemas
- Create / update payloads (super admin)
- Settings payload (company admin, own company)
- Billing override payload
- Read schema
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    address: str | None = Field(None, description="Postal address")
    phone: str | None = Field(None, max_length=30, description="Contact phone")
    email: EmailStr | None = Field(None, description="Contact email")


class CompanyCreate(CompanyBase):
    subscription_tier: str = Field("basic", max_length=50, description="Subscription tier label")


class CompanyUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=200)
    address: str | None = None
    phone: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    subscription_tier: str | None = Field(None, max_length=50)


class CompanySettingsUpdate(CompanyBase):
    """Fields a company admin may edit on their own company."""

    pass


class CompanyBillingUpdate(BaseModel):
    custom_license_fee: float | None = Field(
        None, ge=0, description="License fee override; null restores the platform default"
    )
    custom_per_guard_fee: float | None = Field(
        None, ge=0, description="Per-guard fee override; null restores the platform default"
    )


class CompanyRead(CompanyBase):
    id: UUID
    company_code: str
    logo_url: str | None = None
    subscription_tier: str
    is_active: bool
    custom_license_fee: float | None = None
    custom_per_guard_fee: float | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
