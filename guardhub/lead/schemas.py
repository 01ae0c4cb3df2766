"""
lead/schemas.py

Schemas for contact-form leads.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from guardhub.lead.models import LeadStatus


class LeadCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    company: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, max_length=30)
    product_interest: str | None = Field(None, max_length=100, description="e.g. guard management, patrol")
    message: str = Field(..., min_length=1, max_length=5000)


class LeadStatusUpdate(BaseModel):
    status: LeadStatus


class LeadRead(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    company: str | None = None
    phone: str | None = None
    product_interest: str | None = None
    message: str
    source: str
    status: LeadStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
