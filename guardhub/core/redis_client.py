"""
guardhub/core/redis_client.py

Shared async Redis client.

One connection pool serves token revocation, login brute-force counters
and the report cache. Short socket timeouts keep a slow Redis from
stalling requests; every caller treats a Redis error as "no data".
"""

import logging

import redis.asyncio as redis

from guardhub.core.config import settings

logger = logging.getLogger(__name__)

REDIS_SOCKET_TIMEOUT = 2.0

redis_client: redis.Redis | None = None  # type: ignore[type-arg]

try:
    redis_client = redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        decode_responses=True,
        socket_timeout=REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT,
        health_check_interval=30,
    )
    logger.info(f"[REDIS] Client ready for {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
except redis.RedisError as e:
    logger.error(f"[REDIS] Client initialization failed, running without Redis: {e}")
    redis_client = None


async def close_redis_client() -> None:
    """Releases the pool on application shutdown."""
    if redis_client is None:
        return
    try:
        await redis_client.aclose()
    except redis.RedisError as e:
        logger.warning(f"[REDIS] Error while closing client: {e}")
