"""
staff/schemas.py

Schemas for staff (security officers and site managers):
- Create / update / status toggle payloads
- Staff read model
- Employment history and assignment history views
"""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from guardhub.core.validators import password_validator
from guardhub.database.enums import EmploymentStatus, UserRole
from guardhub.shift.models import ShiftStatus

STAFF_ROLES: tuple[UserRole, ...] = (UserRole.SECURITY_OFFICER, UserRole.SITE_MANAGER)


def staff_role_validator(role: UserRole | None) -> UserRole | None:
    if role is not None and role not in STAFF_ROLES:
        raise ValueError("Role must be security_officer or site_manager")
    return role


StaffRole = Annotated[UserRole, AfterValidator(staff_role_validator)]


class StaffCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: Annotated[str, AfterValidator(password_validator)] = Field(
        ..., description="Initial password (min 6 characters)"
    )
    phone: str | None = Field(None, max_length=30)
    role: StaffRole = Field(UserRole.SECURITY_OFFICER, description="security_officer or site_manager")
    company_id: UUID | None = Field(None, description="Target company (super admin only)")


class StaffUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=150)
    phone: str | None = Field(None, max_length=30)
    role: StaffRole | None = None


class StaffStatusToggle(BaseModel):
    reason: str | None = Field(None, description="Reason for leaving, recorded on deactivation")


class StaffRead(BaseModel):
    id: UUID
    email: EmailStr
    full_name: str
    phone: str | None = None
    role: UserRole
    company_id: UUID | None = None
    staff_code: str | None = None
    employment_status: EmploymentStatus
    avatar_url: str | None = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmploymentHistoryRead(BaseModel):
    id: UUID
    guard_id: UUID
    company_id: UUID
    company_name: str | None = None
    start_date: date
    end_date: date | None = None
    reason_for_leaving: str | None = None
    is_current: bool


class AssignmentRead(BaseModel):
    shift_id: UUID
    site_id: UUID
    site_name: str | None = None
    site_address: str | None = None
    start_time: datetime
    end_time: datetime
    status: ShiftStatus
    hours_worked: float = Field(..., description="Scheduled duration in hours")


class AssignmentSummary(BaseModel):
    total_shifts: int = 0
    completed_shifts: int = 0
    total_hours: float = 0.0


class AssignmentHistoryResponse(BaseModel):
    summary: AssignmentSummary
    assignments: list[AssignmentRead]
