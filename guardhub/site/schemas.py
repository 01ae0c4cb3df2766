"""
site/schemas.py

Schemas for guarded sites and the weekly schedule view.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guardhub.shift.models import ShiftStatus


class SiteBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Site name")
    address: str = Field("", description="Street address")
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    contact_name: str | None = Field(None, max_length=150)
    contact_phone: str | None = Field(None, max_length=30)
    is_active: bool = True


class SiteCreate(SiteBase):
    company_id: UUID | None = Field(
        None, description="Owning company; only honoured for super admins"
    )


class SiteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    address: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    contact_name: str | None = Field(None, max_length=150)
    contact_phone: str | None = Field(None, max_length=30)
    is_active: bool | None = None


class SiteRead(SiteBase):
    id: UUID
    company_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------
# Weekly View
# ---------------------------------------------------
class SiteShiftSlot(BaseModel):
    id: UUID
    guard_id: UUID
    guard_name: str | None = None
    start_time: datetime
    end_time: datetime
    status: ShiftStatus


class SiteWeek(BaseModel):
    site: SiteRead
    shifts: list[SiteShiftSlot] = Field(default_factory=list)


class SiteWeeklyView(BaseModel):
    week_start: datetime = Field(..., description="Sunday 00:00")
    week_end: datetime = Field(..., description="Saturday 23:59:59.999")
    sites: list[SiteWeek]
