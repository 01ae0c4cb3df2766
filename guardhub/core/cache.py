"""
guardhub/core/cache.py

Short-lived JSON cache on top of the shared Redis client.
Used for read-heavy summaries (analytics, daily reports). Redis errors
are logged and treated as cache misses.
"""

import json
import logging
from typing import Any

from redis.exceptions import RedisError

from guardhub.core.redis_client import redis_client
from guardhub.core.config import settings

logger = logging.getLogger(__name__)

CACHE_PREFIX = "guardhub:"


def cache_key(namespace: str, *parts: Any) -> str:
    """Builds a namespaced cache key, e.g. guardhub:analytics:<company>:30."""
    suffix = ":".join(str(p) for p in parts if p is not None) or "all"
    return f"{CACHE_PREFIX}{namespace}:{suffix}"


async def cache_get(key: str) -> Any | None:
    if not redis_client:
        return None
    try:
        raw = await redis_client.get(key)
    except RedisError as e:
        logger.error(f"[CACHE] Read failed for {key}: {e}")
        return None
    if raw is None:
        return None
    logger.debug(f"[CACHE] Hit {key}")
    return json.loads(raw)


async def cache_set(key: str, value: Any, ttl: int | None = None) -> None:
    if not redis_client:
        return
    try:
        await redis_client.setex(key, ttl or settings.REPORT_CACHE_TTL, json.dumps(value, default=str))
    except RedisError as e:
        logger.error(f"[CACHE] Write failed for {key}: {e}")

