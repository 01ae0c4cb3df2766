"""
incident/schemas.py

Schemas for incident reporting.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from guardhub.incident.models import IncidentSeverity, IncidentStatus


class IncidentCreate(BaseModel):
    site_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    severity: IncidentSeverity = IncidentSeverity.MEDIUM
    shift_id: UUID | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class IncidentStatusUpdate(BaseModel):
    status: IncidentStatus


class IncidentRead(BaseModel):
    id: UUID
    site_id: UUID
    site_name: str | None = None
    reported_by: UUID
    reporter_name: str | None = None
    shift_id: UUID | None = None
    title: str
    description: str
    severity: IncidentSeverity
    status: IncidentStatus
    occurred_at: datetime
    latitude: float | None = None
    longitude: float | None = None
    media_urls: list[str] = Field(default_factory=list)
    created_at: datetime
