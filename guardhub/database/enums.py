"""
guardhub/database/enums.py

Enumerations shared across domains:
- UserRole: platform roles used for access control
- EmploymentStatus: whether a staff member is currently employed
- AuditAction: verbs recorded in the audit log

Domain-specific status enums live next to their models.
"""

from enum import Enum
from sqlalchemy import Enum as SAEnum


def pg_enum(enum_cls: type[Enum], name: str) -> SAEnum:
    """Postgres enum column type that stores the member *values* (lower-case wire strings)."""
    return SAEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


# ---------------------------------------------------
# User Role Enumeration
# ---------------------------------------------------
class UserRole(str, Enum):
    """
    Roles assigned to profiles.

    - SUPER_ADMIN: platform operator, not tied to a company
    - COMPANY_ADMIN: manages one security company
    - SITE_MANAGER: supervises sites and guards of one company
    - SECURITY_OFFICER: field guard
    """

    SUPER_ADMIN = "super_admin"
    COMPANY_ADMIN = "company_admin"
    SITE_MANAGER = "site_manager"
    SECURITY_OFFICER = "security_officer"


COMPANY_ROLES: tuple[UserRole, ...] = (UserRole.COMPANY_ADMIN, UserRole.SITE_MANAGER)
MANAGEMENT_ROLES: tuple[UserRole, ...] = (UserRole.SUPER_ADMIN, *COMPANY_ROLES)
ALL_ROLES: tuple[UserRole, ...] = (*MANAGEMENT_ROLES, UserRole.SECURITY_OFFICER)


# ---------------------------------------------------
# Employment Status Enumeration
# ---------------------------------------------------
class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# ---------------------------------------------------
# Audit Action Enumeration
# ---------------------------------------------------
class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
