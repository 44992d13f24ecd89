"""Tests for the asyncpg store against a mocked pool."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import asyncpg
import pytest

from parkhub.core.exceptions import DuplicateResourceError, StoreError, TransactionError
from parkhub.features.database.entities.config import DatabaseConfig
from parkhub.features.database.repositories.asyncpg_store import AsyncPGSession, AsyncPGStore


class _AsyncContext:
    """Async context manager yielding a fixed value."""

    def __init__(self, value=None):
        self.value = value

    async def __aenter__(self):
        return self.value

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def connection():
    connection = MagicMock()
    connection.execute = AsyncMock(return_value="DELETE 1")
    connection.fetchrow = AsyncMock(return_value=None)
    connection.fetch = AsyncMock(return_value=[])
    connection.fetchval = AsyncMock(return_value=1)
    connection.transaction = MagicMock(return_value=_AsyncContext())
    return connection


@pytest.fixture
def pool(connection):
    pool = MagicMock()
    pool.acquire = MagicMock(return_value=_AsyncContext(connection))
    pool.close = AsyncMock()
    return pool


@pytest.fixture
def config():
    return DatabaseConfig(host="db", port=5432, database="parkhub", user="u", password="p", lock_timeout_ms=1500)


@pytest.fixture
def create_pool(pool):
    with patch("asyncpg.create_pool", new=AsyncMock(return_value=pool)) as create_pool:
        yield create_pool


class TestAsyncPGStore:

    @pytest.mark.asyncio
    async def test_pool_created_once(self, config, create_pool):
        store = AsyncPGStore(config)
        await store.connect()
        await store.connect()
        create_pool.assert_awaited_once()
        assert create_pool.await_args.kwargs["database"] == "parkhub"

    @pytest.mark.asyncio
    async def test_pool_failure(self, config):
        with patch("asyncpg.create_pool", new=AsyncMock(side_effect=OSError("refused"))):
            with pytest.raises(StoreError):
                await AsyncPGStore(config).connect()

    @pytest.mark.asyncio
    async def test_write_transaction_sets_lock_timeout(self, config, create_pool, connection):
        store = AsyncPGStore(config)
        async with store.transaction() as session:
            assert isinstance(session, AsyncPGSession)
        connection.transaction.assert_called_once_with(isolation="read_committed", readonly=False)
        connection.execute.assert_awaited_once_with("SET LOCAL lock_timeout = '1500ms'")

    @pytest.mark.asyncio
    async def test_read_only_transaction(self, config, create_pool, connection):
        store = AsyncPGStore(config)
        async with store.transaction(read_only=True):
            pass
        connection.transaction.assert_called_once_with(isolation="read_committed", readonly=True)
        connection.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_translated(self, config, create_pool, connection):
        failing = MagicMock()
        failing.__aenter__ = AsyncMock(return_value=None)
        failing.__aexit__ = AsyncMock(side_effect=asyncpg.exceptions.SerializationError("conflict"))
        connection.transaction.return_value = failing
        with pytest.raises(TransactionError):
            async with AsyncPGStore(config).transaction(read_only=True):
                pass

    @pytest.mark.asyncio
    async def test_close(self, config, create_pool, pool):
        store = AsyncPGStore(config)
        await store.connect()
        assert await store.health_check()
        await store.close()
        pool.close.assert_awaited_once()
        assert not await store.health_check()

    def test_rejects_unknown_isolation(self, config):
        config.isolation = "chaos"
        with pytest.raises(ValueError):
            AsyncPGStore(config)


class TestAsyncPGSession:

    @pytest.mark.asyncio
    async def test_lock_one_selects_for_update(self, connection):
        row_id = uuid4()
        connection.fetchrow.return_value = {"id": row_id, "address_id": None, "price": 3}
        row = await AsyncPGSession(connection).lock_one("parking", row_id)
        assert row["price"] == 3
        query, arg = connection.fetchrow.await_args.args
        assert query.endswith("FOR UPDATE")
        assert arg == row_id

    @pytest.mark.asyncio
    async def test_fetch_many(self, connection):
        connection.fetch.return_value = [{"parking_id": 1, "car_id": 2}]
        rows = await AsyncPGSession(connection).fetch_many("parking_car", {"car_id": 2})
        assert rows == [{"parking_id": 1, "car_id": 2}]

    @pytest.mark.asyncio
    async def test_delete_reports_count(self, connection):
        connection.execute.return_value = "DELETE 0"
        assert not await AsyncPGSession(connection).delete("car", uuid4())
        connection.execute.return_value = "DELETE 2"
        assert await AsyncPGSession(connection).delete_where("parking_car", {"car_id": 1}) == 2

    @pytest.mark.asyncio
    async def test_driver_errors_translated(self, connection):
        error = asyncpg.exceptions.UniqueViolationError("duplicate key")
        error.table_name = "car"
        error.constraint_name = "car_model_key"
        connection.fetchrow.side_effect = error
        with pytest.raises(DuplicateResourceError) as exc_info:
            await AsyncPGSession(connection).insert("car", {"id": uuid4(), "model": "Vesta"})
        assert exc_info.value.field_name == "model"
