"""
pricing/models.py

Defines PricingPlan: a public subscription offer shown on the pricing page.
Limits of -1 mean unlimited.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from guardhub.database.base import Base

UNLIMITED = -1


class PricingPlan(Base):
    __tablename__ = "pricing_plans"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    monthly_license_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    yearly_license_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    per_guard_monthly_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    per_guard_yearly_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    features: Mapped[list[str]] = mapped_column(
        ARRAY(String), default=list, server_default="{}", nullable=False
    )
    max_users: Mapped[int] = mapped_column(Integer, default=UNLIMITED, nullable=False)
    max_sites: Mapped[int] = mapped_column(Integer, default=UNLIMITED, nullable=False)
    max_guards: Mapped[int] = mapped_column(Integer, default=UNLIMITED, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
