"""
staff/services.py

Staff Service Layer
- Listing and creation of officers / site managers with per-company staff codes
- Profile updates and activation toggling (with employment history)
- Employment history and shift assignment history
"""

import logging
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.auth.services import close_realtime_sessions, get_password_hash
from guardhub.company.models import Company
from guardhub.core.dependencies import resolve_company_scope
from guardhub.core.email import send_staff_invitation
from guardhub.database.enums import AuditAction, EmploymentStatus, UserRole
from guardhub.database.models import Profile
from guardhub.shift.models import Shift, ShiftStatus
from guardhub.staff import schemas
from guardhub.staff.models import EmploymentHistory
from guardhub.utils.dates import hours_between

logger = logging.getLogger(__name__)

STAFF_CODE_PREFIXES: dict[UserRole, str] = {
    UserRole.SECURITY_OFFICER: "SO",
    UserRole.SITE_MANAGER: "SM",
}
STAFF_ROLES = schemas.STAFF_ROLES


# ---------------------------------------------------
# Staff Codes
# ---------------------------------------------------
def format_staff_code(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:04d}"


def next_staff_sequence(existing_codes: Iterable[str | None], prefix: str) -> int:
    """Highest sequence already issued under `prefix`, plus one."""
    highest = 0
    for code in existing_codes:
        if not code or not code.startswith(f"{prefix}-"):
            continue
        suffix = code[len(prefix) + 1 :]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


def summarize_assignments(assignments: list[schemas.AssignmentRead]) -> schemas.AssignmentSummary:
    return schemas.AssignmentSummary(
        total_shifts=len(assignments),
        completed_shifts=sum(1 for a in assignments if a.status == ShiftStatus.COMPLETED),
        total_hours=round(sum(a.hours_worked for a in assignments), 2),
    )


class StaffService:
    """Service class for staff administration."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _generate_staff_code(self, company_id: UUID, role: UserRole) -> str:
        prefix = STAFF_CODE_PREFIXES[role]
        result = await self.db.execute(
            select(Profile.staff_code).filter(
                Profile.company_id == company_id,
                Profile.staff_code.like(f"{prefix}-%"),
            )
        )
        return format_staff_code(prefix, next_staff_sequence(result.scalars().all(), prefix))

    async def get_staff_in_scope(self, user: Profile, staff_id: UUID) -> Profile:
        """
        Officers may only look at themselves; company roles at their own
        company's staff; super admins at anyone.
        """
        if staff_id == user.id:
            return user

        if user.role == UserRole.SECURITY_OFFICER:
            logger.warning(f"[STAFF] Officer {user.id} tried to read staff {staff_id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="You do not have access to this profile"
            )

        staff = await self.db.get(Profile, staff_id)
        if not staff:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
        if user.role != UserRole.SUPER_ADMIN:
            resolve_company_scope(user, staff.company_id)
        return staff

    # ---------------------------------------------------
    # Listing & Creation
    # ---------------------------------------------------
    async def list_staff(self, user: Profile, company_id: UUID | None = None) -> list[Profile]:
        scope = resolve_company_scope(user, company_id)
        stmt = select(Profile).order_by(Profile.full_name)
        if scope is not None:
            stmt = stmt.filter(Profile.company_id == scope, Profile.role.in_(STAFF_ROLES))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_staff(self, user: Profile, payload: schemas.StaffCreate) -> Profile:
        company_id = resolve_company_scope(user, payload.company_id)
        if company_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="company_id is required"
            )
        company = await self.db.get(Company, company_id)
        if not company:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

        existing = await self.db.execute(select(Profile.id).filter(Profile.email == payload.email))
        if existing.scalar_one_or_none():
            logger.warning(f"[STAFF] Email already registered: {payload.email}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

        role = payload.role
        staff_code = await self._generate_staff_code(company_id, role)
        staff = Profile(
            email=payload.email,
            hashed_password=get_password_hash(payload.password),
            full_name=payload.full_name,
            phone=payload.phone,
            role=role,
            company_id=company_id,
            staff_code=staff_code,
            employment_status=EmploymentStatus.ACTIVE,
            is_active=True,
        )
        self.db.add(staff)
        await self.db.flush()

        self.db.add(
            EmploymentHistory(
                guard_id=staff.id,
                company_id=company_id,
                start_date=date.today(),
                is_current=True,
            )
        )
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "profile",
            staff.id,
            {"email": staff.email, "role": role.value, "staff_code": staff_code},
        )
        await self.db.commit()
        await self.db.refresh(staff)
        logger.info(f"[STAFF] Created {role.value} {staff.id} ({staff_code}) in company {company_id}")

        try:
            await send_staff_invitation(
                staff.email, staff.full_name, company.name, company.company_code, staff_code
            )
        except Exception as e:
            logger.error(f"[STAFF] Failed to send invitation to {staff.email}: {e}")

        return staff

    # ---------------------------------------------------
    # Updates
    # ---------------------------------------------------
    async def update_staff(self, user: Profile, staff_id: UUID, payload: schemas.StaffUpdate) -> Profile:
        staff = await self.get_staff_in_scope(user, staff_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(staff, field, value)
        record_audit(self.db, user.id, AuditAction.UPDATE, "profile", staff.id, changes)
        await self.db.commit()
        await self.db.refresh(staff)
        logger.info(f"[STAFF] Updated staff {staff.id}: {list(changes)}")
        return staff

    async def toggle_staff_status(
        self, user: Profile, staff_id: UUID, reason: str | None = None
    ) -> Profile:
        staff = await self.get_staff_in_scope(user, staff_id)
        if staff.id == user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate yourself"
            )

        staff.is_active = not staff.is_active
        staff.employment_status = (
            EmploymentStatus.ACTIVE if staff.is_active else EmploymentStatus.INACTIVE
        )

        result = await self.db.execute(
            select(EmploymentHistory).filter(
                EmploymentHistory.guard_id == staff.id, EmploymentHistory.is_current.is_(True)
            )
        )
        current = result.scalars().first()
        if not staff.is_active and current:
            current.is_current = False
            current.end_date = date.today()
            current.reason_for_leaving = reason
        elif staff.is_active and not current and staff.company_id:
            self.db.add(
                EmploymentHistory(
                    guard_id=staff.id,
                    company_id=staff.company_id,
                    start_date=date.today(),
                    is_current=True,
                )
            )

        record_audit(
            self.db,
            user.id,
            AuditAction.UPDATE,
            "profile",
            staff.id,
            {"is_active": staff.is_active, "reason": reason},
        )
        await self.db.commit()
        await self.db.refresh(staff)
        logger.info(f"[STAFF] Staff {staff.id} is_active={staff.is_active}")
        if not staff.is_active:
            await close_realtime_sessions(staff.id, "Account deactivated")
        return staff

    # ---------------------------------------------------
    # Histories
    # ---------------------------------------------------
    async def employment_history(
        self, user: Profile, staff_id: UUID
    ) -> list[schemas.EmploymentHistoryRead]:
        staff = await self.get_staff_in_scope(user, staff_id)
        result = await self.db.execute(
            select(EmploymentHistory)
            .options(selectinload(EmploymentHistory.company))
            .filter(EmploymentHistory.guard_id == staff.id)
            .order_by(EmploymentHistory.start_date.desc())
        )
        return [
            schemas.EmploymentHistoryRead(
                id=row.id,
                guard_id=row.guard_id,
                company_id=row.company_id,
                company_name=row.company.name if row.company else None,
                start_date=row.start_date,
                end_date=row.end_date,
                reason_for_leaving=row.reason_for_leaving,
                is_current=row.is_current,
            )
            for row in result.scalars().all()
        ]

    async def assignment_history(
        self, user: Profile, staff_id: UUID
    ) -> schemas.AssignmentHistoryResponse:
        staff = await self.get_staff_in_scope(user, staff_id)
        result = await self.db.execute(
            select(Shift)
            .options(selectinload(Shift.site))
            .filter(Shift.guard_id == staff.id)
            .order_by(Shift.start_time.desc())
        )
        assignments = [
            schemas.AssignmentRead(
                shift_id=shift.id,
                site_id=shift.site_id,
                site_name=shift.site.name if shift.site else None,
                site_address=shift.site.address if shift.site else None,
                start_time=shift.start_time,
                end_time=shift.end_time,
                status=shift.status,
                hours_worked=hours_between(shift.start_time, shift.end_time),
            )
            for shift in result.scalars().all()
        ]
        return schemas.AssignmentHistoryResponse(
            summary=summarize_assignments(assignments), assignments=assignments
        )
