"""
company/models.py

Defines the Company model.
- A tenant of the platform: owns sites, staff, equipment and invoices
- Carries the six-character company code officers use to sign in
- Optional per-company billing overrides
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardhub.database.base import Base

if TYPE_CHECKING:
    from guardhub.database.models import Profile
    from guardhub.site.models import Site


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, comment="Unique identifier"
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, comment="Company name")
    company_code: Mapped[str] = mapped_column(
        String(12), unique=True, index=True, nullable=False, comment="Sign-in code for officers"
    )
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True, comment="Public logo URL")
    subscription_tier: Mapped[str] = mapped_column(
        String(50), default="basic", nullable=False, comment="Subscription tier label"
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Billing overrides (NULL means "use the platform default")
    custom_license_fee: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True, comment="Monthly license fee override"
    )
    custom_per_guard_fee: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True, comment="Per-guard monthly fee override"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    profiles: Mapped[list["Profile"]] = relationship("Profile", back_populates="company")
    sites: Mapped[list["Site"]] = relationship(
        "Site", back_populates="company", cascade="all, delete-orphan"
    )
