"""PostgreSQL relational store backed by an asyncpg connection pool."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg

from ....core.exceptions import StoreError, TransactionError
from ..entities.config import DatabaseConfig
from ..entities.protocols import Row
from ..utils.error_handling import translate_postgres_error
from ..utils.queries import (
    BASIC_HEALTH_CHECK,
    SCHEMA_DDL,
    SET_LOCAL_LOCK_TIMEOUT,
    build_select_by_id,
    build_select_where,
    build_insert,
    build_update,
    build_delete_by_id,
    build_delete_where,
    parse_command_count,
)

logger = logging.getLogger(__name__)

ISOLATION_LEVELS = ("read_committed", "repeatable_read", "serializable")


class AsyncPGSession:
    """StoreSession bound to one connection inside an open transaction."""

    def __init__(self, connection: asyncpg.Connection, log_sql: bool = False):
        self._connection = connection
        self._log_sql = log_sql

    async def _run(self, method: str, query: str, *args: Any) -> Any:
        if self._log_sql:
            logger.debug(f"SQL {method}: {query} | params={len(args)}")
        try:
            return await getattr(self._connection, method)(query, *args)
        except asyncpg.PostgresError as e:
            raise translate_postgres_error(e) from e

    async def fetch_one(self, table: str, row_id: Any) -> Optional[Row]:
        record = await self._run("fetchrow", build_select_by_id(table), row_id)
        return dict(record) if record else None

    async def fetch_many(self, table: str, where: Optional[Dict[str, Any]] = None) -> List[Row]:
        query, args = build_select_where(table, where or {})
        records = await self._run("fetch", query, *args)
        return [dict(record) for record in records]

    async def lock_one(self, table: str, row_id: Any) -> Optional[Row]:
        record = await self._run("fetchrow", build_select_by_id(table, for_update=True), row_id)
        return dict(record) if record else None

    async def insert(self, table: str, values: Row) -> Row:
        query, args = build_insert(table, values)
        record = await self._run("fetchrow", query, *args)
        return dict(record)

    async def update(self, table: str, row_id: Any, values: Row) -> Optional[Row]:
        query, args = build_update(table, row_id, values)
        record = await self._run("fetchrow", query, *args)
        return dict(record) if record else None

    async def delete(self, table: str, row_id: Any) -> bool:
        status = await self._run("execute", build_delete_by_id(table), row_id)
        return parse_command_count(status) > 0

    async def delete_where(self, table: str, where: Dict[str, Any]) -> int:
        query, args = build_delete_where(table, where)
        status = await self._run("execute", query, *args)
        return parse_command_count(status)


class AsyncPGStore:
    """RelationalStore over a lazily created asyncpg pool.

    Transactions run at the configured isolation level (READ COMMITTED by
    default). Write transactions set a transaction-local ``lock_timeout`` so
    a blocked ``FOR UPDATE`` surfaces as LockTimeoutError instead of hanging.
    """

    def __init__(self, config: DatabaseConfig, log_sql: bool = False):
        if config.isolation not in ISOLATION_LEVELS:
            raise ValueError(f"Unsupported isolation level: {config.isolation}")
        self._config = config
        self._log_sql = log_sql
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def _create_pool(self) -> asyncpg.Pool:
        """Create the asyncpg connection pool."""
        try:
            pool = await asyncpg.create_pool(
                host=self._config.host,
                port=self._config.port,
                database=self._config.database,
                user=self._config.user,
                password=self._config.password,
                min_size=self._config.pool_min_size,
                max_size=self._config.pool_max_size,
                command_timeout=self._config.command_timeout,
            )
            logger.info(
                f"Created connection pool for {self._config.safe_dsn}: "
                f"min={self._config.pool_min_size}, max={self._config.pool_max_size}"
            )
            return pool
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to create pool for {self._config.safe_dsn}: {e}")
            raise StoreError(f"Failed to create connection pool: {e}")

    async def _ensure_pool(self) -> asyncpg.Pool:
        """Ensure the pool is created and available."""
        if self._pool is None:
            async with self._lock:
                if self._pool is None:  # Double-check
                    self._pool = await self._create_pool()
        return self._pool

    async def connect(self) -> None:
        await self._ensure_pool()

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool:
            async with self._lock:
                if self._pool:
                    await self._pool.close()
                    self._pool = None
                    logger.info(f"Closed connection pool for {self._config.safe_dsn}")

    @asynccontextmanager
    async def transaction(self, read_only: bool = False) -> AsyncIterator[AsyncPGSession]:
        pool = await self._ensure_pool()
        try:
            async with pool.acquire(timeout=self._config.command_timeout) as connection:
                async with connection.transaction(isolation=self._config.isolation, readonly=read_only):
                    if not read_only and self._config.lock_timeout_ms:
                        await connection.execute(
                            SET_LOCAL_LOCK_TIMEOUT.format(timeout_ms=int(self._config.lock_timeout_ms))
                        )
                    yield AsyncPGSession(connection, self._log_sql)
        except asyncpg.PostgresError as e:
            # Raised at COMMIT (e.g. serialization failure)
            raise translate_postgres_error(e) from e
        except asyncpg.InterfaceError as e:
            logger.error(f"Connection failure on {self._config.safe_dsn}: {e}")
            raise TransactionError(f"Transaction failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransactionError(f"Timed out acquiring a connection: {e}") from e

    async def create_schema(self) -> None:
        """Create tables and indexes when absent."""
        pool = await self._ensure_pool()
        try:
            async with pool.acquire() as connection:
                await connection.execute(SCHEMA_DDL)
            logger.info("Ensured parkhub schema")
        except asyncpg.PostgresError as e:
            raise translate_postgres_error(e) from e

    async def health_check(self) -> bool:
        if not self._pool:
            return False
        try:
            async with self._pool.acquire() as connection:
                await connection.fetchval(BASIC_HEALTH_CHECK)
            return True
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning(f"Pool health check failed: {e}")
            return False
