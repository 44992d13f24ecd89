"""Tests for the cache-aside coordinator."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio

from parkhub.core.exceptions import CacheError, NotFoundError
from parkhub.core.projections import CarShort
from parkhub.features.cache.adapters.memory_adapter import MemoryAdapter
from parkhub.features.coherence.entities.keys import EntityKind, cache_key
from parkhub.features.coherence.services.coordinator import CacheCoordinator
from parkhub.features.database.repositories.memory_store import InMemoryStore


@pytest_asyncio.fixture
async def store():
    store = InMemoryStore()
    await store.connect()
    return store


@pytest_asyncio.fixture
async def cache():
    cache = MemoryAdapter()
    await cache.connect()
    return cache


@pytest.fixture
def coordinator(store, cache):
    return CacheCoordinator(store, cache)


def snapshot(car_id):
    return CarShort(id=car_id, brand="Lada", model="Vesta", description="d")


class TestGetOrLoad:

    @pytest.mark.asyncio
    async def test_miss_loads_and_caches(self, coordinator, cache):
        car_id = uuid4()
        loader = AsyncMock(return_value=snapshot(car_id))
        first = await coordinator.get_or_load(EntityKind.CAR, car_id, CarShort, loader)
        second = await coordinator.get_or_load(EntityKind.CAR, car_id, CarShort, loader)
        assert first == second == snapshot(car_id)
        loader.assert_awaited_once()
        assert await cache.exists(cache_key(EntityKind.CAR, car_id))

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, coordinator, cache):
        car_id = uuid4()
        loader = AsyncMock(side_effect=NotFoundError("Car", car_id))
        with pytest.raises(NotFoundError):
            await coordinator.get_or_load(EntityKind.CAR, car_id, CarShort, loader)
        assert await cache.keys() == []

    @pytest.mark.asyncio
    async def test_addresses_rejected(self, coordinator):
        with pytest.raises(ValueError):
            await coordinator.get_or_load(EntityKind.ADDRESS, uuid4(), CarShort, AsyncMock())

    @pytest.mark.asyncio
    async def test_cache_failure_propagates(self, store):
        cache = AsyncMock()
        cache.get.side_effect = CacheError("down")
        loader = AsyncMock()
        with pytest.raises(CacheError):
            await CacheCoordinator(store, cache).get_or_load(EntityKind.CAR, uuid4(), CarShort, loader)
        loader.assert_not_awaited()


class TestMutation:

    @pytest.mark.asyncio
    async def test_invalidates_after_commit(self, coordinator, cache):
        await cache.set("car::1", "{}")
        await cache.set("car::2", "{}")
        async with coordinator.mutation() as scope:
            scope.plan.add(EntityKind.CAR, "1")
            assert await cache.exists("car::1")
        assert not await cache.exists("car::1")
        assert await cache.exists("car::2")

    @pytest.mark.asyncio
    async def test_rollback_keeps_cache(self, coordinator, cache):
        await cache.set("car::1", "{}")
        with pytest.raises(RuntimeError):
            async with coordinator.mutation() as scope:
                scope.plan.add(EntityKind.CAR, "1")
                raise RuntimeError("abort")
        assert await cache.exists("car::1")

    @pytest.mark.asyncio
    async def test_invalidate_key(self, coordinator, cache):
        await cache.set("parking::9", "{}")
        assert await coordinator.invalidate_key(EntityKind.PARKING, "9")
        assert not await coordinator.invalidate_key(EntityKind.PARKING, "9")
