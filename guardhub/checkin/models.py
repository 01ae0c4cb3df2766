"""
checkin/models.py

Defines CheckIn: proof that a guard reached a checkpoint (selfie + location).
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardhub.database.base import Base

if TYPE_CHECKING:
    from guardhub.database.models import Profile
    from guardhub.patrol.models import Checkpoint


class CheckIn(Base):
    __tablename__ = "check_ins"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    checkpoint_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("checkpoints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    guard_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    photo_url: Mapped[str | None] = mapped_column(String, nullable=True, comment="Selfie URL")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    checkpoint: Mapped["Checkpoint"] = relationship("Checkpoint")
    guard: Mapped["Profile"] = relationship("Profile")
