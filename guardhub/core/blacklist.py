"""
guardhub/core/blacklist.py

Access token revocation.

Logout stores the token's `jti` under `guardhub:revoked:<jti>` until the
token would have expired anyway; `get_current_user` rejects revoked ids.
When Redis is unreachable revocation is skipped and tokens stay valid
until their natural expiry.
"""

import logging

from redis.exceptions import RedisError

from guardhub.core import redis_client as redis_store

logger = logging.getLogger(__name__)

REVOKED_PREFIX = "guardhub:revoked:"


def revoked_key(jti: str) -> str:
    return f"{REVOKED_PREFIX}{jti}"


async def blacklist_token(jti: str, expires_in: int) -> bool:
    """
    Revokes a token id for `expires_in` seconds (at least one).

    Returns:
        bool: True when the revocation was stored.
    """
    client = redis_store.redis_client
    if client is None:
        logger.warning(f"[TOKENS] Redis unavailable, jti={jti} not revoked")
        return False

    try:
        await client.set(revoked_key(jti), "1", ex=max(expires_in, 1))
    except RedisError as e:
        logger.error(f"[TOKENS] Failed to revoke jti={jti}: {e}")
        return False

    logger.debug(f"[TOKENS] Revoked jti={jti} for {expires_in}s")
    return True


async def is_token_blacklisted(jti: str) -> bool:
    client = redis_store.redis_client
    if client is None:
        return False
    try:
        return bool(await client.exists(revoked_key(jti)))
    except RedisError as e:
        logger.error(f"[TOKENS] Revocation lookup failed for jti={jti}: {e}")
        return False
