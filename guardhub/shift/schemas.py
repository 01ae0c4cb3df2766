"""
shift/schemas.py

Schemas for shift scheduling.
"""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from guardhub.shift.models import ShiftStatus


class ShiftView(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"


class ShiftCreate(BaseModel):
    site_id: UUID
    guard_id: UUID
    start_time: datetime
    end_time: datetime
    notes: str | None = Field(None, description="Instructions for the guard")

    @model_validator(mode="after")
    def end_after_start(self) -> "ShiftCreate":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class ShiftStatusUpdate(BaseModel):
    status: ShiftStatus


class ShiftRead(BaseModel):
    id: UUID
    site_id: UUID
    site_name: str | None = None
    guard_id: UUID
    guard_name: str | None = None
    start_time: datetime
    end_time: datetime
    status: ShiftStatus
    notes: str | None = None
    created_at: datetime
