"""
auth/services.py

Handles authentication-related business logic:
- Password hashing and verification
- Brute-force protection (per-IP Redis counters and penalty window)
- Login with company code enforcement for security officers
- JWT issuance and logout (token blacklisting)
- Public company signup
- Own profile settings and password change
"""

import asyncio
import logging
import random
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from jose import JWTError
from passlib.context import CryptContext
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.audit.services import record_audit
from guardhub.auth.schemas import (
    AuthUserResponse,
    CompanySignupRequest,
    CompanySignupResponse,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
)
from guardhub.company.models import Company
from guardhub.company.services import generate_unique_company_code
from guardhub.core.blacklist import blacklist_token
from guardhub.core.redis_client import redis_client
from guardhub.core.config import settings
from guardhub.core.email import send_company_welcome_email
from guardhub.core.schemas import MessageResponse
from guardhub.core.tokens import create_access_token, decode_access_token, seconds_until_expiry
from guardhub.database.enums import AuditAction, EmploymentStatus, UserRole
from guardhub.database.models import Profile
from guardhub.messaging.manager import manager as chat_manager
from guardhub.sos.manager import manager as sos_manager

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ------------------------------------------------
# Brute-Force Protection Settings (Redis Keys and Thresholds)
# ------------------------------------------------
FAILED_LOGIN_PREFIX = "failed_logins:ip:"
IP_PENALTY_PREFIX = "ip_penalty:"

MAX_FAILED_ATTEMPTS = settings.MAX_FAILED_ATTEMPTS
IP_PENALTY_DURATION = settings.IP_PENALTY_DURATION
FAILED_ATTEMPTS_WINDOW = settings.FAILED_ATTEMPTS_WINDOW

TOO_MANY_ATTEMPTS = "Too many failed login attempts. Please try again later."


# ------------------------------------------------
# Password Utilities
# ------------------------------------------------
def get_password_hash(password: str) -> str:
    """Hashes a plain text password."""
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain text password against a hash."""
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


# ------------------------------------------------
# Brute-Force Helpers
# ------------------------------------------------
async def _ensure_ip_not_penalized(client_ip: str) -> None:
    if not redis_client:
        return
    try:
        penalized = await redis_client.exists(f"{IP_PENALTY_PREFIX}{client_ip}")
    except RedisError as e:
        logger.error(f"[AUTH] Could not read penalty state for {client_ip}: {e}")
        return
    if penalized:
        logger.warning(f"[AUTH] Login attempt from penalized IP: {client_ip}")
        await asyncio.sleep(random.uniform(0.5, 1.5))
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=TOO_MANY_ATTEMPTS)


async def _register_failed_attempt(client_ip: str) -> None:
    """Counts a failure; the IP is penalized once the window holds MAX_FAILED_ATTEMPTS."""
    if not redis_client:
        return
    key = f"{FAILED_LOGIN_PREFIX}{client_ip}"
    try:
        failed_attempts = int(await redis_client.incr(key))
        if await redis_client.ttl(key) == -1:
            await redis_client.expire(key, FAILED_ATTEMPTS_WINDOW)
        if failed_attempts >= MAX_FAILED_ATTEMPTS:
            await redis_client.setex(f"{IP_PENALTY_PREFIX}{client_ip}", IP_PENALTY_DURATION, "penalized")
            logger.warning(f"[AUTH] IP address penalized due to too many failed attempts: {client_ip}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=TOO_MANY_ATTEMPTS
            )
    except RedisError as e:
        logger.error(f"[AUTH] Could not record failed login for {client_ip}: {e}")
        return
    await asyncio.sleep(random.uniform(0.2, 0.6))


async def _reset_failed_attempts(client_ip: str) -> None:
    if not redis_client:
        return
    try:
        await redis_client.delete(f"{FAILED_LOGIN_PREFIX}{client_ip}")
        logger.debug(f"[AUTH] Resetting failed login attempts for IP: {client_ip}")
    except RedisError as e:
        logger.error(f"[AUTH] Could not reset failed logins for {client_ip}: {e}")


# ------------------------------------------------
# Response Builders
# ------------------------------------------------
def build_auth_user(profile: Profile, company: Company | None = None) -> AuthUserResponse:
    """Combines a profile with its company's branding."""
    return AuthUserResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        phone=profile.phone,
        role=profile.role,
        company_id=profile.company_id,
        company_name=company.name if company else None,
        company_code=company.company_code if company else None,
        company_logo_url=company.logo_url if company else None,
        staff_code=profile.staff_code,
        avatar_url=profile.avatar_url,
        employment_status=profile.employment_status,
        is_active=profile.is_active,
        created_at=profile.created_at,
    )


async def _load_company(db: AsyncSession, profile: Profile) -> Company | None:
    if profile.company_id is None:
        return None
    return await db.get(Company, profile.company_id)


# ------------------------------------------------
# Login
# ------------------------------------------------
async def _verify_company_code(db: AsyncSession, profile: Profile, company_code: str | None) -> Company:
    """Officers must name the active company they belong to."""
    if not company_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company code is required for security officers",
        )

    result = await db.execute(
        select(Company).filter(
            Company.company_code == company_code.strip().upper(),
            Company.is_active.is_(True),
        )
    )
    company = result.scalar_one_or_none()
    if not company:
        logger.warning(f"[AUTH] Invalid company code '{company_code}' for officer {profile.id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid company code")

    if profile.company_id != company.id:
        logger.warning(
            f"[AUTH] Officer {profile.id} tried to sign in to foreign company {company.id}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="You do not have access to this company"
        )
    return company


async def login_user(payload: LoginRequest, db: AsyncSession, client_ip: str) -> LoginResponse:
    """
    Authenticates a profile by email/password (plus company code for officers)
    and issues an access token.
    """
    await _ensure_ip_not_penalized(client_ip)

    result = await db.execute(select(Profile).filter(Profile.email == payload.email))
    profile = result.scalar_one_or_none()

    if not profile:
        logger.warning(f"[AUTH] Login for unknown email {payload.email} from IP: {client_ip}")
        await _register_failed_attempt(client_ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No profile found for this user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not verify_password(payload.password, profile.hashed_password):
        logger.warning(f"[AUTH] Failed login attempt for email: {payload.email} from IP: {client_ip}")
        await _register_failed_attempt(client_ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not profile.is_active:
        logger.warning(f"[AUTH] Login attempt by inactive profile: {profile.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Your account has been deactivated"
        )

    if profile.role == UserRole.SECURITY_OFFICER:
        company = await _verify_company_code(db, profile, payload.company_code)
    else:
        company = await _load_company(db, profile)

    await _reset_failed_attempts(client_ip)

    access_token = create_access_token({"sub": str(profile.id), "role": profile.role.value})
    record_audit(db, profile.id, AuditAction.LOGIN, "profile", profile.id)
    await db.commit()

    logger.info(f"[AUTH] Profile logged in: {profile.email} ({profile.role.value}) from IP: {client_ip}")
    return LoginResponse(access_token=access_token, user=build_auth_user(profile, company))


# ------------------------------------------------
# Logout
# ------------------------------------------------
async def logout_user_token(token: str | None, profile: Profile, db: AsyncSession) -> MessageResponse:
    """Blacklists the access token for the rest of its lifetime and audits the logout."""
    if token:
        try:
            payload = decode_access_token(token)
            jti = payload.get("jti")
            ttl = seconds_until_expiry(payload)
            if jti and ttl > 0:
                await blacklist_token(jti, ttl)
                logger.info(f"[AUTH] Access token blacklisted (JTI: {jti}) for {ttl} seconds.")
            else:
                logger.info("[AUTH] Token already expired or missing jti. No blacklist needed.")
        except JWTError as e:
            logger.warning(f"[AUTH] Error decoding token during logout: {e}")

    record_audit(db, profile.id, AuditAction.LOGOUT, "profile", profile.id)
    await db.commit()
    await close_realtime_sessions(profile.id, "Logged out")
    return MessageResponse(detail="Logout successful")


# ------------------------------------------------
# Realtime Sessions
# ------------------------------------------------
async def close_realtime_sessions(profile_id: UUID, reason: str) -> None:
    """Closes the profile's open SOS and chat sockets so it stops receiving events."""
    closed = await sos_manager.close_profile(profile_id, reason)
    closed += await chat_manager.close_profile(profile_id, reason)
    if closed:
        logger.info(f"[AUTH] Closed {closed} realtime connection(s) for profile {profile_id}: {reason}")


# ------------------------------------------------
# Current Profile
# ------------------------------------------------
async def get_me(profile: Profile, db: AsyncSession) -> AuthUserResponse:
    company = await _load_company(db, profile)
    return build_auth_user(profile, company)


# ------------------------------------------------
# Company Signup
# ------------------------------------------------
async def signup_company(payload: CompanySignupRequest, db: AsyncSession) -> CompanySignupResponse:
    """Registers a new security company together with its first company admin."""
    existing = await db.execute(select(Profile.id).filter(Profile.email == payload.email))
    if existing.scalar_one_or_none():
        logger.warning(f"[AUTH] Signup attempt with existing email: {payload.email}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    company_code = await generate_unique_company_code(db)
    company = Company(
        name=payload.company_name,
        company_code=company_code,
        email=payload.company_email,
        phone=payload.company_phone,
        address=payload.company_address,
        is_active=True,
    )
    db.add(company)
    await db.flush()

    admin = Profile(
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=UserRole.COMPANY_ADMIN,
        company_id=company.id,
        employment_status=EmploymentStatus.ACTIVE,
        is_active=True,
    )
    db.add(admin)
    await db.flush()

    record_audit(
        db,
        admin.id,
        AuditAction.CREATE,
        "company",
        company.id,
        {"name": company.name, "company_code": company_code},
    )
    await db.commit()
    await db.refresh(company)
    await db.refresh(admin)
    logger.info(f"[AUTH] Company {company.id} registered with admin {admin.email}")

    try:
        await send_company_welcome_email(admin.email, admin.full_name, company.name, company_code)
    except Exception as e:
        logger.error(f"[AUTH] Failed to send welcome email to {admin.email}: {e}")

    return CompanySignupResponse(
        company_id=company.id,
        company_code=company_code,
        user=build_auth_user(admin, company),
    )


# ------------------------------------------------
# Profile Settings
# ------------------------------------------------
async def update_profile(
    profile: Profile, payload: ProfileUpdateRequest, db: AsyncSession
) -> AuthUserResponse:
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    record_audit(db, profile.id, AuditAction.UPDATE, "profile", profile.id, changes)
    await db.commit()
    await db.refresh(profile)
    logger.info(f"[AUTH] Profile {profile.id} updated: {list(changes)}")
    return await get_me(profile, db)


async def change_password(
    profile: Profile, payload: PasswordChangeRequest, db: AsyncSession
) -> MessageResponse:
    if not verify_password(payload.current_password, profile.hashed_password):
        logger.warning(f"[AUTH] Wrong current password on password change for {profile.id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect"
        )

    profile.hashed_password = get_password_hash(payload.new_password)
    record_audit(
        db, profile.id, AuditAction.UPDATE, "profile", profile.id, {"password_changed": True}
    )
    await db.commit()
    logger.info(f"[AUTH] Password changed for profile {profile.id}")
    return MessageResponse(detail="Password updated successfully")
