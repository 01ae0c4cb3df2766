"""
guardhub/database/models.py

Core SQLAlchemy ORM Models

Defines:
- Profile: authenticated platform user (admins, managers and security officers)

Imports every domain model so the mapper registry (and Alembic metadata)
is complete whenever this module is loaded.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardhub.database.base import Base
from guardhub.database.enums import EmploymentStatus, UserRole, pg_enum
from guardhub.company.models import Company
from guardhub.site.models import Site  # noqa: F401
from guardhub.staff.models import EmploymentHistory  # noqa: F401
from guardhub.shift.models import Shift  # noqa: F401
from guardhub.incident.models import Incident  # noqa: F401
from guardhub.sos.models import SOSAlert  # noqa: F401
from guardhub.patrol.models import Checkpoint, PatrolRoute  # noqa: F401
from guardhub.checkin.models import CheckIn  # noqa: F401
from guardhub.equipment.models import Equipment  # noqa: F401
from guardhub.billing.models import BillingSettings, Invoice  # noqa: F401
from guardhub.payment.models import Payment, PaymentGateway, PaymentMethod, PaymentTransaction  # noqa: F401
from guardhub.lead.models import Lead  # noqa: F401
from guardhub.audit.models import AuditLog  # noqa: F401
from guardhub.pricing.models import PricingPlan  # noqa: F401
from guardhub.tracking.models import RealTimeLocation  # noqa: F401
from guardhub.messaging.models import ChatMessage  # noqa: F401


# ---------------------------------------------------
# Profile Model: Authenticated Platform User
# ---------------------------------------------------
class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("company_id", "staff_code", name="uq_profiles_company_staff_code"),
    )

    # -------------------------------------
    # Fields
    # -------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the profile",
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False, comment="Login email address"
    )
    hashed_password: Mapped[str] = mapped_column(
        String, nullable=False, comment="Bcrypt hash of the password"
    )
    full_name: Mapped[str] = mapped_column(String(150), nullable=False, comment="Display name")
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True, comment="Contact phone")
    role: Mapped[UserRole] = mapped_column(
        pg_enum(UserRole, "user_role"), nullable=False, comment="Access role"
    )
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Employing company (NULL for super admins)",
    )
    staff_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True, comment="Per-company staff code, e.g. SO-0007"
    )
    employment_status: Mapped[EmploymentStatus] = mapped_column(
        pg_enum(EmploymentStatus, "employment_status"),
        default=EmploymentStatus.ACTIVE,
        nullable=False,
        comment="Current employment status",
    )
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True, comment="Avatar image URL")
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, comment="Whether the profile may sign in"
    )

    # -------------------------------------
    # Audit Fields
    # -------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------
    company: Mapped[Optional["Company"]] = relationship("Company", back_populates="profiles")
