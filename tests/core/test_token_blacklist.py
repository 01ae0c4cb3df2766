"""
tests/core/test_token_blacklist.py

Unit tests for access token revocation on the shared Redis client.
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from guardhub.core import blacklist
from guardhub.core import redis_client as redis_store


@pytest.mark.asyncio
async def test_revoked_token_is_reported_blacklisted() -> None:
    client = AsyncMock()
    client.exists.return_value = 1
    with patch.object(redis_store, "redis_client", client):
        assert await blacklist.blacklist_token("abc", 120) is True
        assert await blacklist.is_token_blacklisted("abc") is True

    client.set.assert_awaited_once_with("guardhub:revoked:abc", "1", ex=120)
    client.exists.assert_awaited_once_with("guardhub:revoked:abc")


@pytest.mark.asyncio
async def test_expired_token_is_revoked_for_at_least_one_second() -> None:
    client = AsyncMock()
    with patch.object(redis_store, "redis_client", client):
        await blacklist.blacklist_token("abc", 0)
    assert client.set.await_args.kwargs["ex"] == 1


@pytest.mark.asyncio
async def test_redis_outage_leaves_tokens_valid() -> None:
    client = AsyncMock()
    client.set.side_effect = RedisConnectionError("down")
    client.exists.side_effect = RedisConnectionError("down")
    with patch.object(redis_store, "redis_client", client):
        assert await blacklist.blacklist_token("abc", 60) is False
        assert await blacklist.is_token_blacklisted("abc") is False


@pytest.mark.asyncio
async def test_without_client_nothing_is_revoked() -> None:
    with patch.object(redis_store, "redis_client", None):
        assert await blacklist.blacklist_token("abc", 60) is False
        assert await blacklist.is_token_blacklisted("abc") is False
