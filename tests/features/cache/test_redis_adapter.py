"""Tests for the Redis cache adapter with a mocked client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from parkhub.core.exceptions import CacheConnectionError, CacheError
from parkhub.features.cache.adapters.redis_adapter import RedisAdapter
from parkhub.features.cache.entities.config import CacheConfig


@pytest.fixture
def client():
    client = AsyncMock()
    client.get.return_value = '{"id": 1}'
    client.delete.return_value = 1
    client.exists.return_value = 1
    client.ping.return_value = True
    return client


@pytest.fixture
def adapter(client):
    return RedisAdapter(CacheConfig(url="redis://cache:6379/1"), client=client)


class TestRedisAdapter:

    @pytest.mark.asyncio
    async def test_get(self, adapter, client):
        assert await adapter.get("car::1") == '{"id": 1}'
        client.get.assert_awaited_once_with("car::1")

    @pytest.mark.asyncio
    async def test_set_without_expiry(self, adapter, client):
        await adapter.set("car::1", "{}")
        client.set.assert_awaited_once_with("car::1", "{}", ex=None)

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, adapter, client):
        await adapter.set("car::1", "{}", ttl=30)
        client.set.assert_awaited_once_with("car::1", "{}", ex=30)

    @pytest.mark.asyncio
    async def test_delete_many(self, adapter, client):
        client.delete.return_value = 2
        assert await adapter.delete_many(["a", "b", "c"]) == 2
        client.delete.assert_awaited_once_with("a", "b", "c")

    @pytest.mark.asyncio
    async def test_delete_many_empty(self, adapter, client):
        assert await adapter.delete_many([]) == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_errors_become_cache_errors(self, adapter, client):
        client.get.side_effect = RedisError("boom")
        with pytest.raises(CacheError):
            await adapter.get("car::1")

    @pytest.mark.asyncio
    async def test_requires_connection(self):
        adapter = RedisAdapter(CacheConfig())
        with pytest.raises(CacheConnectionError):
            await adapter.get("car::1")
        assert not await adapter.health_check()

    @pytest.mark.asyncio
    async def test_connect_pings(self):
        client = AsyncMock()
        with patch("parkhub.features.cache.adapters.redis_adapter.ConnectionPool.from_url", return_value=MagicMock()), \
                patch("parkhub.features.cache.adapters.redis_adapter.Redis", return_value=client):
            adapter = RedisAdapter(CacheConfig())
            await adapter.connect()
        client.ping.assert_awaited_once()
        assert adapter.client is client

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        with patch("parkhub.features.cache.adapters.redis_adapter.ConnectionPool.from_url", return_value=MagicMock()), \
                patch("parkhub.features.cache.adapters.redis_adapter.Redis", return_value=client):
            with pytest.raises(CacheConnectionError):
                await RedisAdapter(CacheConfig()).connect()

    @pytest.mark.asyncio
    async def test_disconnect(self, adapter, client):
        await adapter.disconnect()
        client.aclose.assert_awaited_once()
        with pytest.raises(CacheConnectionError):
            adapter.client
