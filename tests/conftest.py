"""
tests/conftest.py

Test fixtures for API route and unit tests.
Includes the async client, fake profiles for every role and dependency overrides.
"""

import os

# Rate limiting and outbound email are off for the test run
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMAILS_ENABLED", "false")

# --- Imports ---
from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from guardhub.core.dependencies import get_current_user
from guardhub.database.enums import EmploymentStatus, UserRole
from guardhub.database.models import Profile
from guardhub.database.session import get_db
from guardhub.main import app

COMPANY_ID: UUID = uuid4()


def make_profile(
    role: UserRole,
    company_id: UUID | None = COMPANY_ID,
    full_name: str = "Test User",
    staff_code: str | None = None,
) -> Profile:
    """Builds a transient Profile for route and service tests."""
    now = datetime.now(timezone.utc)
    return Profile(
        id=uuid4(),
        email=f"{role.value}.{uuid4().hex[:6]}@example.com",
        hashed_password="fakehashedpassword",
        full_name=full_name,
        phone="08011110000",
        role=role,
        company_id=company_id,
        staff_code=staff_code,
        employment_status=EmploymentStatus.ACTIVE,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


# --- Core Test Fixtures ---
@pytest.fixture(scope="session")
def transport() -> ASGITransport:
    """Fixture for ASGI transport."""
    return ASGITransport(app=app)


@pytest_asyncio.fixture(scope="function")
async def async_client(transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Fixture for HTTP async client."""
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# --- Fake Profile Fixtures ---
@pytest.fixture
def company_id() -> UUID:
    return COMPANY_ID


@pytest.fixture
def fake_super_admin() -> Profile:
    return make_profile(UserRole.SUPER_ADMIN, company_id=None, full_name="Platform Admin")


@pytest.fixture
def fake_company_admin() -> Profile:
    return make_profile(UserRole.COMPANY_ADMIN, full_name="Company Admin")


@pytest.fixture
def fake_site_manager() -> Profile:
    return make_profile(UserRole.SITE_MANAGER, full_name="Site Manager", staff_code="SM-0001")


@pytest.fixture
def fake_officer() -> Profile:
    return make_profile(UserRole.SECURITY_OFFICER, full_name="Officer Test", staff_code="SO-0001")


# --- Dependency Override Fixtures ---
@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    return db


@pytest_asyncio.fixture
async def override_get_db(mock_db: AsyncMock) -> AsyncGenerator[AsyncMock, None]:
    """Override for the database dependency."""

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db] = _override
    yield mock_db
    app.dependency_overrides.pop(get_db, None)


def _as_current_user(profile: Profile) -> Generator[Profile, None, None]:
    app.dependency_overrides[get_current_user] = lambda: profile
    yield profile
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def mock_current_super_admin(fake_super_admin: Profile) -> Generator[Profile, None, None]:
    yield from _as_current_user(fake_super_admin)


@pytest.fixture
def mock_current_company_admin(fake_company_admin: Profile) -> Generator[Profile, None, None]:
    yield from _as_current_user(fake_company_admin)


@pytest.fixture
def mock_current_site_manager(fake_site_manager: Profile) -> Generator[Profile, None, None]:
    yield from _as_current_user(fake_site_manager)


@pytest.fixture
def mock_current_officer(fake_officer: Profile) -> Generator[Profile, None, None]:
    yield from _as_current_user(fake_officer)


@pytest.fixture
def profile_factory():
    """Factory for extra transient profiles inside a test."""
    return make_profile
