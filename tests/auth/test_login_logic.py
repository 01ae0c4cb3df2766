"""
tests/auth/test_login_logic.py

Service-level tests for login_user: credential checks, inactive accounts
and the company code rule for security officers.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException

from guardhub.auth import services as auth_services
from guardhub.auth.schemas import LoginRequest
from guardhub.company.models import Company
from guardhub.core.tokens import create_access_token, decode_access_token
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _company(company_id) -> Company:
    return Company(id=company_id, name="Acme Security", company_code="AB12CD", is_active=True)


@pytest.fixture(autouse=True)
def no_redis():
    with patch.object(auth_services, "redis_client", None):
        yield


@pytest.mark.asyncio
async def test_unknown_email_is_401(mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = _result(None)
    payload = LoginRequest(email="ghost@example.com", password="secret1")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 401


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=False)
async def test_wrong_password_is_401(_verify: MagicMock, mock_db: AsyncMock, fake_company_admin: Profile) -> None:
    mock_db.execute.return_value = _result(fake_company_admin)
    payload = LoginRequest(email=fake_company_admin.email, password="wrong1")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid credentials"
    mock_db.commit.assert_not_awaited()


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_inactive_profile_is_403(_verify: MagicMock, mock_db: AsyncMock, fake_site_manager: Profile) -> None:
    fake_site_manager.is_active = False
    mock_db.execute.return_value = _result(fake_site_manager)
    payload = LoginRequest(email=fake_site_manager.email, password="secret1")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 403


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_officer_without_company_code_is_400(
    _verify: MagicMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    mock_db.execute.return_value = _result(fake_officer)
    payload = LoginRequest(email=fake_officer.email, password="secret1")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 400


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_officer_with_unknown_company_code_is_401(
    _verify: MagicMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    mock_db.execute.side_effect = [_result(fake_officer), _result(None)]
    payload = LoginRequest(email=fake_officer.email, password="secret1", company_code="ZZ99ZZ")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid company code"


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_officer_of_another_company_is_403(
    _verify: MagicMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    mock_db.execute.side_effect = [_result(fake_officer), _result(_company(uuid4()))]
    payload = LoginRequest(email=fake_officer.email, password="secret1", company_code="AB12CD")

    with pytest.raises(HTTPException) as exc:
        await auth_services.login_user(payload, mock_db, "127.0.0.1")
    assert exc.value.status_code == 403


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_officer_login_success(_verify: MagicMock, mock_db: AsyncMock, fake_officer: Profile) -> None:
    company = _company(fake_officer.company_id)
    mock_db.execute.side_effect = [_result(fake_officer), _result(company)]
    payload = LoginRequest(email=fake_officer.email, password="secret1", company_code="ab12cd")

    response = await auth_services.login_user(payload, mock_db, "127.0.0.1")

    assert response.user.id == fake_officer.id
    assert response.user.company_code == "AB12CD"
    claims = decode_access_token(response.access_token)
    assert claims["sub"] == str(fake_officer.id)
    assert claims["role"] == UserRole.SECURITY_OFFICER.value
    assert "jti" in claims
    mock_db.add.assert_called_once()
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
@patch.object(auth_services, "verify_password", return_value=True)
async def test_super_admin_login_needs_no_company(
    _verify: MagicMock, mock_db: AsyncMock, profile_factory
) -> None:
    admin = profile_factory(UserRole.SUPER_ADMIN, company_id=None)
    mock_db.execute.return_value = _result(admin)
    payload = LoginRequest(email=admin.email, password="secret1")

    response = await auth_services.login_user(payload, mock_db, "10.0.0.1")

    assert response.user.company_id is None
    assert response.user.company_name is None
    mock_db.get.assert_not_awaited()


# --- Logout ---
@pytest.mark.asyncio
@patch.object(auth_services, "close_realtime_sessions", new_callable=AsyncMock)
@patch.object(auth_services, "blacklist_token", new_callable=AsyncMock)
async def test_logout_revokes_token_and_closes_sockets(
    mock_blacklist: AsyncMock, mock_close: AsyncMock, mock_db: AsyncMock, fake_officer: Profile
) -> None:
    token = create_access_token({"sub": str(fake_officer.id), "role": fake_officer.role.value})
    jti = decode_access_token(token)["jti"]

    response = await auth_services.logout_user_token(token, fake_officer, mock_db)

    assert response.detail == "Logout successful"
    assert mock_blacklist.await_args.args[0] == jti
    mock_close.assert_awaited_once_with(fake_officer.id, "Logged out")
    mock_db.commit.assert_awaited_once()
