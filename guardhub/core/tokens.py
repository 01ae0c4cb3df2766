"""
core/tokens.py

JWT access token creation and decoding with expiration and JTI.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from guardhub.core.config import settings

logger = logging.getLogger(__name__)


# ------------------------------------------------------
# --- Access Token ---
# ------------------------------------------------------
def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token with expiration and unique JTI.

    Args:
        data (dict[str, Any]): Payload data to include in the token (must contain 'sub' and 'role').
        expires_delta (timedelta | None): Optional custom expiration time. Defaults to settings.

    Returns:
        str: Encoded JWT access token.
    """
    if "sub" not in data or "role" not in data:
        logger.error("Access token creation attempt missing 'sub' or 'role' in data.")
        raise ValueError("Access token payload must include 'sub' and 'role'.")

    expire: datetime = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    jti: str = str(uuid.uuid4())
    payload: dict[str, Any] = {**data, "exp": expire, "jti": jti}

    logger.info(f"Issuing access token for sub={data.get('sub')} exp={expire} jti={jti}")
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return str(token)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decodes and verifies an access token. Raises jose.JWTError when invalid."""
    payload: dict[str, Any] = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    return payload


def seconds_until_expiry(payload: dict[str, Any]) -> int:
    """Remaining lifetime of a decoded token in whole seconds (never negative)."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    remaining = int(exp) - int(datetime.now(timezone.utc).timestamp())
    return max(remaining, 0)
