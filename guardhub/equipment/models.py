"""
equipment/models.py

Defines Equipment with its type and status enums.
"""

import enum
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardhub.database.base import Base
from guardhub.database.enums import pg_enum

if TYPE_CHECKING:
    from guardhub.database.models import Profile
    from guardhub.site.models import Site


class EquipmentType(str, enum.Enum):
    RADIO = "radio"
    FLASHLIGHT = "flashlight"
    BATON = "baton"
    VEST = "vest"
    CAMERA = "camera"
    OTHER = "other"


class EquipmentStatus(str, enum.Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    LOST = "lost"


class Equipment(Base):
    __tablename__ = "equipment"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    site_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("sites.id", ondelete="SET NULL"), nullable=True
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[EquipmentType] = mapped_column(
        pg_enum(EquipmentType, "equipment_type"), default=EquipmentType.OTHER, nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[EquipmentStatus] = mapped_column(
        pg_enum(EquipmentStatus, "equipment_status"),
        default=EquipmentStatus.AVAILABLE,
        nullable=False,
    )
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    site: Mapped[Optional["Site"]] = relationship("Site")
    holder: Mapped[Optional["Profile"]] = relationship("Profile")
