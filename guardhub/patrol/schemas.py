"""
patrol/schemas.py

Schemas for patrol routes and their QR checkpoints.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------
# Checkpoints
# ---------------------------------------------------
class CheckpointDraft(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class CheckpointCreate(CheckpointDraft):
    order_index: int | None = Field(None, ge=0, description="Defaults to the end of the route")


class CheckpointUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    order_index: int | None = Field(None, ge=0)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class CheckpointRead(BaseModel):
    id: UUID
    route_id: UUID
    name: str
    description: str | None = None
    qr_code: str
    order_index: int
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------
# Routes
# ---------------------------------------------------
class PatrolRouteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    site_id: UUID
    checkpoints: list[CheckpointDraft] = Field(
        default_factory=list, description="Checkpoints created in this order"
    )


class PatrolRouteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    is_active: bool | None = None


class PatrolRouteRead(BaseModel):
    id: UUID
    company_id: UUID
    site_id: UUID
    site_name: str | None = None
    name: str
    is_active: bool
    checkpoint_count: int = 0
    created_at: datetime
