"""
auth/routes.py

Handles authentication routes including:
- Login (company code for officers) with HttpOnly cookie session
- Logout with token blacklisting
- Current profile
- Public company signup
- Profile settings and password change
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Request, Response, status

from guardhub.auth import services
from guardhub.auth.schemas import (
    AuthUserResponse,
    CompanySignupRequest,
    CompanySignupResponse,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
)
from guardhub.core.config import settings
from guardhub.core.dependencies import CurrentUserDep, DBDep, oauth2_scheme
from guardhub.core.limiter import limiter
from guardhub.core.schemas import MessageResponse

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------
# Login
# ---------------------------------------------------
@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login (Cookie Auth)",
    description="Authenticates by email/password; security officers must also send their company code. "
    "Returns the token and profile in the body and sets the token in an HttpOnly cookie.",
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    payload: LoginRequest,
    response: Response,
    db: DBDep,
) -> LoginResponse:
    client_ip = request.client.host if request.client else "unknown"
    login_result = await services.login_user(payload, db, client_ip)

    response.set_cookie(
        key="access_token",
        value=login_result.access_token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        domain=None,
    )
    return login_result


# ---------------------------------------------------
# Logout
# ---------------------------------------------------
@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout",
    description="Blacklists the current token and clears the session cookie.",
)
@limiter.limit("10/minute")
async def logout(
    request: Request,
    response: Response,
    db: DBDep,
    current_user: CurrentUserDep,
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    token_cookie: Annotated[str | None, Cookie(alias="access_token")] = None,
) -> MessageResponse:
    result = await services.logout_user_token(token_header or token_cookie, current_user, db)
    response.delete_cookie(key="access_token", path="/")
    return result


# ---------------------------------------------------
# Current Profile
# ---------------------------------------------------
@router.get(
    "/me",
    response_model=AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get Current Profile",
)
@limiter.limit("60/minute")
async def me(request: Request, db: DBDep, current_user: CurrentUserDep) -> AuthUserResponse:
    return await services.get_me(current_user, db)


# ---------------------------------------------------
# Company Signup
# ---------------------------------------------------
@router.post(
    "/signup/company",
    response_model=CompanySignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Security Company",
    description="Creates a company with a unique company code and its first company admin.",
)
@limiter.limit("5/minute")
async def signup_company(
    request: Request, payload: CompanySignupRequest, db: DBDep
) -> CompanySignupResponse:
    return await services.signup_company(payload, db)


# ---------------------------------------------------
# Profile Settings
# ---------------------------------------------------
@router.put(
    "/profile",
    response_model=AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update Own Profile",
)
@limiter.limit("10/minute")
async def update_profile(
    request: Request, payload: ProfileUpdateRequest, db: DBDep, current_user: CurrentUserDep
) -> AuthUserResponse:
    return await services.update_profile(current_user, payload, db)


@router.put(
    "/password",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Change Password",
)
@limiter.limit("5/minute")
async def change_password(
    request: Request, payload: PasswordChangeRequest, db: DBDep, current_user: CurrentUserDep
) -> MessageResponse:
    return await services.change_password(current_user, payload, db)
