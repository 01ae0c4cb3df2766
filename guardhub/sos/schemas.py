"""
sos/schemas.py

Schemas for SOS alerts and their realtime notifications.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from guardhub.sos.models import DEFAULT_SOS_MESSAGE, SOSStatus


class SOSAlertCreate(BaseModel):
    site_id: UUID | None = None
    shift_id: UUID | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    message: str = Field(DEFAULT_SOS_MESSAGE, max_length=1000)


class SOSAlertRead(BaseModel):
    id: UUID
    guard_id: UUID
    guard_name: str | None = None
    company_id: UUID | None = None
    site_id: UUID | None = None
    site_name: str | None = None
    shift_id: UUID | None = None
    latitude: float | None = None
    longitude: float | None = None
    message: str | None = None
    status: SOSStatus
    acknowledged_by: UUID | None = None
    acknowledged_at: datetime | None = None
    resolved_at: datetime | None = None
    created_at: datetime


class SOSEvent(BaseModel):
    """Payload pushed to realtime subscribers; clients re-fetch on receipt."""

    event: Literal["sos_alert"] = "sos_alert"
    action: Literal["created", "acknowledged", "resolved"]
    alert: SOSAlertRead
