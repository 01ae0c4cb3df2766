"""
tracking/schemas.py

Schemas for live location sharing.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guardhub.database.enums import UserRole


class LocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float | None = Field(None, ge=0, description="Metres")
    heading: float | None = Field(None, ge=0, lt=360, description="Degrees")
    speed: float | None = Field(None, ge=0, description="m/s")
    battery_level: int | None = Field(None, ge=0, le=100, description="Percent")


class LocationRead(BaseModel):
    id: UUID
    user_id: UUID
    latitude: float
    longitude: float
    accuracy: float | None = None
    heading: float | None = None
    speed: float | None = None
    battery_level: int | None = None
    is_active: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActiveLocationRead(LocationRead):
    full_name: str | None = None
    role: UserRole | None = None
