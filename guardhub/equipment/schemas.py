"""
equipment/schemas.py

Schemas for company equipment inventory.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from guardhub.equipment.models import EquipmentStatus, EquipmentType


class EquipmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: EquipmentType = EquipmentType.OTHER
    description: str | None = None
    serial_number: str | None = Field(None, max_length=100)
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    assigned_to: UUID | None = Field(None, description="Profile holding the item")
    site_id: UUID | None = None
    purchase_date: date | None = None
    last_maintenance_date: date | None = None
    company_id: UUID | None = Field(None, description="Owning company (super admin only)")


class EquipmentUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    type: EquipmentType | None = None
    description: str | None = None
    serial_number: str | None = Field(None, max_length=100)
    status: EquipmentStatus | None = None
    assigned_to: UUID | None = None
    site_id: UUID | None = None
    purchase_date: date | None = None
    last_maintenance_date: date | None = None


class EquipmentRead(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    type: EquipmentType
    description: str | None = None
    serial_number: str | None = None
    status: EquipmentStatus
    assigned_to: UUID | None = None
    holder_name: str | None = None
    site_id: UUID | None = None
    site_name: str | None = None
    purchase_date: date | None = None
    last_maintenance_date: date | None = None
    created_at: datetime
