"""
tests/core/test_company_scope.py

Unit tests for resolve_company_scope and the role dependency factory.
"""

from uuid import uuid4

import pytest
from fastapi import HTTPException

from guardhub.core.dependencies import require_roles, resolve_company_scope
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile


def test_super_admin_defaults_to_all_companies(fake_super_admin: Profile) -> None:
    assert resolve_company_scope(fake_super_admin) is None


def test_super_admin_can_target_any_company(fake_super_admin: Profile) -> None:
    target = uuid4()
    assert resolve_company_scope(fake_super_admin, target) == target


def test_company_user_is_pinned_to_own_company(fake_site_manager: Profile) -> None:
    assert resolve_company_scope(fake_site_manager) == fake_site_manager.company_id
    assert resolve_company_scope(fake_site_manager, fake_site_manager.company_id) == fake_site_manager.company_id


def test_cross_company_request_is_forbidden(fake_company_admin: Profile) -> None:
    with pytest.raises(HTTPException) as exc:
        resolve_company_scope(fake_company_admin, uuid4())
    assert exc.value.status_code == 403


def test_profile_without_company_is_rejected(profile_factory) -> None:
    orphan = profile_factory(UserRole.SECURITY_OFFICER, company_id=None)
    with pytest.raises(HTTPException) as exc:
        resolve_company_scope(orphan)
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_require_roles_allows_listed_role(fake_company_admin: Profile) -> None:
    checker = require_roles(UserRole.SUPER_ADMIN, UserRole.COMPANY_ADMIN)
    assert await checker(user=fake_company_admin) is fake_company_admin


@pytest.mark.asyncio
async def test_require_roles_rejects_other_roles(fake_officer: Profile) -> None:
    checker = require_roles(UserRole.SUPER_ADMIN, UserRole.COMPANY_ADMIN)
    with pytest.raises(HTTPException) as exc:
        await checker(user=fake_officer)
    assert exc.value.status_code == 403
    assert exc.value.detail == "Access denied for role: security_officer"
