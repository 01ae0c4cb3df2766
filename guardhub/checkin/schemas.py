"""
checkin/schemas.py

Schemas for patrol check-ins.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class CheckInRead(BaseModel):
    id: UUID
    checkpoint_id: UUID
    checkpoint_name: str | None = None
    checkpoint_description: str | None = None
    guard_id: UUID
    checked_in_at: datetime
    photo_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class CheckInCheckpoint(BaseModel):
    """A checkpoint an officer may scan, with the route it belongs to."""

    id: UUID
    name: str
    description: str | None = None
    route_id: UUID
    route_name: str | None = None
    order_index: int
