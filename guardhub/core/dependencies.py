"""
guardhub/core/dependencies.py

Authentication and Authorization Dependencies

Provides authentication and role-based access control (RBAC) for FastAPI routes:
- Validates JWT tokens from Bearer header OR HttpOnly cookie
- Checks against blacklisted tokens (logout protection)
- Retrieves the authenticated profile from the database
- Restricts access based on roles and company scope

Pagination Dependency:
- Reusable dependency for pagination (skip, limit).
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any
from uuid import UUID

from fastapi import Cookie, Depends, HTTPException, Query, WebSocket, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.auth.schemas import TokenPayload
from guardhub.core.blacklist import is_token_blacklisted
from guardhub.core.tokens import decode_access_token
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.database.session import get_db

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# OAuth2 Configuration
# ---------------------------------------------------
# auto_error=False so a missing header falls through to the cookie check
oauth2_scheme: OAuth2PasswordBearer = OAuth2PasswordBearer(
    tokenUrl="/auth/login", auto_error=False
)


class WebSocketAuthError(Exception):
    """Raised when a WebSocket handshake cannot be authenticated."""


# ---------------------------------------------------
# Pagination Dependency
# ---------------------------------------------------
class PaginationParams:
    """
    Dependency that provides pagination parameters from query parameters.
    """

    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Number of records to skip for pagination"),
        limit: int = Query(100, ge=1, le=500, description="Maximum number of records to return"),
    ):
        self.skip = skip
        self.limit = limit


# ---------------------------------------------------
# Authentication Functions
# ---------------------------------------------------
async def get_current_user(
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    token_cookie: Annotated[str | None, Cookie(alias="access_token")] = None,
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    Authenticate the caller from the Bearer header, falling back to the
    HttpOnly `access_token` cookie.

    Raises:
        HTTPException: 401 Unauthorized if authentication fails.
    """
    token = token_header or token_cookie

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"} if token is None else None,
    )

    if token is None:
        logger.debug("[AUTH] No token found in Authorization header or access_token cookie.")
        raise credentials_exception

    try:
        payload = decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValueError) as e:
        logger.warning(f"[AUTH] JWT decoding/validation failed: {e}")
        raise credentials_exception

    if await is_token_blacklisted(token_data.jti):
        logger.warning(f"[AUTH] Blacklisted token detected: jti={token_data.jti}")
        raise credentials_exception

    result = await db.execute(select(Profile).filter(Profile.id == token_data.sub))
    user = result.scalar_one_or_none()

    if not user:
        logger.warning(f"[AUTH] JWT valid but no matching profile: user_id={token_data.sub}")
        raise credentials_exception

    if not user.is_active:
        logger.warning(f"[AUTH] Authentication attempt by inactive profile: {user.id}")
        raise credentials_exception

    logger.debug(
        f"[AUTH] Profile {user.id} authenticated via {'Header' if token_header else 'Cookie'}."
    )
    return user


async def get_current_user_from_ws(websocket: WebSocket, db: AsyncSession) -> Profile:
    """
    Authenticate a WebSocket client. Accepts `Authorization: Bearer`,
    the `access_token` cookie, or a `token` query parameter (browsers
    cannot set headers on WebSocket handshakes).

    Raises:
        WebSocketAuthError: If the token is missing or invalid. The socket is closed first.
    """
    token_header = websocket.headers.get("Authorization")
    token = None
    if token_header and token_header.startswith("Bearer "):
        token = token_header.removeprefix("Bearer ")
    else:
        token = websocket.cookies.get("access_token") or websocket.query_params.get("token")

    if not token:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Authentication token missing."
        )
        raise WebSocketAuthError("Missing token in WebSocket headers, cookies or query.")

    try:
        return await get_current_user(token_header=token, token_cookie=None, db=db)
    except HTTPException as e:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason=f"Authentication failed: {e.detail}"
        )
        raise WebSocketAuthError(f"Authentication failed: {e.detail}")


# ---------------------------------------------------
# Authorization Functions (Role-Based)
# ---------------------------------------------------
def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, Profile]]:
    """
    Dependency to restrict access to profiles having any of the specified roles.
    """

    async def checker(user: Profile = Depends(get_current_user)) -> Profile:
        if user.role not in roles:
            logger.warning(
                f"[RBAC] Access denied: User {user.id} with role {user.role} attempted access (allowed roles: {roles})"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role: {user.role.value}",
            )
        return user

    return checker


def resolve_company_scope(user: Profile, company_id: UUID | None = None) -> UUID | None:
    """
    Decide which company a request operates on.

    - super_admin: the requested company_id (None means "all companies")
    - everyone else: always their own company; asking for another one is a 403

    Raises:
        HTTPException: 403 on cross-company access, 400 when a company user has no company.
    """
    if user.role == UserRole.SUPER_ADMIN:
        return company_id

    if user.company_id is None:
        logger.warning(f"[RBAC] Profile {user.id} ({user.role}) has no company assigned")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No company assigned to this profile"
        )
    if company_id is not None and company_id != user.company_id:
        logger.warning(
            f"[RBAC] Cross-company access denied: user={user.id} company={user.company_id} requested={company_id}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="You do not have access to this company"
        )
    return user.company_id


# ---------------------------------------------------
# Annotated Shortcuts
# ---------------------------------------------------
DBDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]
SuperAdminDep = Annotated[Profile, Depends(require_roles(UserRole.SUPER_ADMIN))]
ManagementDep = Annotated[
    Profile,
    Depends(require_roles(UserRole.SUPER_ADMIN, UserRole.COMPANY_ADMIN, UserRole.SITE_MANAGER)),
]
AdminDep = Annotated[
    Profile, Depends(require_roles(UserRole.SUPER_ADMIN, UserRole.COMPANY_ADMIN))
]
CompanyAdminDep = Annotated[Profile, Depends(require_roles(UserRole.COMPANY_ADMIN))]
OfficerDep = Annotated[Profile, Depends(require_roles(UserRole.SECURITY_OFFICER))]
