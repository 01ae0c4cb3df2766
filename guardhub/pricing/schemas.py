"""
pricing/schemas.py

Schemas for public pricing plans and quotes.
"""

import enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guardhub.pricing.models import UNLIMITED


class BillingCycle(str, enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PricingPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=2000)
    monthly_license_fee: Decimal = Field(..., ge=0, decimal_places=2)
    yearly_license_fee: Decimal = Field(..., ge=0, decimal_places=2)
    per_guard_monthly_fee: Decimal = Field(..., ge=0, decimal_places=2)
    per_guard_yearly_fee: Decimal = Field(..., ge=0, decimal_places=2)
    currency: str = Field("USD", min_length=3, max_length=3)
    features: list[str] = Field(default_factory=list)
    max_users: int = Field(UNLIMITED, ge=UNLIMITED, description="-1 means unlimited")
    max_sites: int = Field(UNLIMITED, ge=UNLIMITED, description="-1 means unlimited")
    max_guards: int = Field(UNLIMITED, ge=UNLIMITED, description="-1 means unlimited")
    is_active: bool = True
    is_featured: bool = False
    display_order: int = 0


class PricingPlanCreate(PricingPlanBase):
    pass


class PricingPlanUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    monthly_license_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    yearly_license_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    per_guard_monthly_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    per_guard_yearly_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    currency: str | None = Field(None, min_length=3, max_length=3)
    features: list[str] | None = None
    max_users: int | None = Field(None, ge=UNLIMITED)
    max_sites: int | None = Field(None, ge=UNLIMITED)
    max_guards: int | None = Field(None, ge=UNLIMITED)
    is_active: bool | None = None
    is_featured: bool | None = None
    display_order: int | None = None


class PricingPlanRead(PricingPlanBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PricingQuote(BaseModel):
    plan_id: UUID
    plan_name: str
    cycle: BillingCycle
    guards: int
    license_fee: Decimal
    per_guard_fee: Decimal
    total: Decimal
    currency: str
