"""
sos/manager.py

Realtime SOS channel.
Subscribers are grouped by company; super admins join the platform group.
"""

from uuid import UUID

from guardhub.core.manager import ConnectionManager
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile

PLATFORM_GROUP = "platform"

manager = ConnectionManager("SOS WS")


def subscription_group(user: Profile) -> str | None:
    """The group a subscriber listens on; None when the profile has no company."""
    if user.role == UserRole.SUPER_ADMIN:
        return PLATFORM_GROUP
    return str(user.company_id) if user.company_id else None


def broadcast_groups(company_id: UUID | None) -> list[str]:
    """Every alert change goes to its company and to the platform operators."""
    groups = [PLATFORM_GROUP]
    if company_id:
        groups.insert(0, str(company_id))
    return groups
