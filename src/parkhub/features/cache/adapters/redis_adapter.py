"""Redis cache adapter for parkhub."""

import logging
from typing import Iterable, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from ....core.exceptions import CacheError, CacheConnectionError
from ..entities.config import CacheConfig

logger = logging.getLogger(__name__)


class RedisAdapter:
    """Cache backed by a Redis server through ``redis.asyncio``."""

    def __init__(self, config: CacheConfig, client: Optional[Redis] = None):
        self.config = config
        self.redis_client: Optional[Redis] = client
        self.connection_pool: Optional[ConnectionPool] = None
        self._connected = client is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._connected:
            return

        try:
            self.connection_pool = ConnectionPool.from_url(
                self.config.url, **self.config.to_connection_kwargs()
            )
            self.redis_client = Redis(connection_pool=self.connection_pool)
            await self.redis_client.ping()
            self._connected = True
            logger.info(f"Connected to Redis: {self.config.safe_url}")
        except RedisError as e:
            raise CacheConnectionError(f"Failed to connect to Redis: {e}")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis_client:
            try:
                await self.redis_client.aclose()
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {e}")
            finally:
                self.redis_client = None
                self.connection_pool = None
                self._connected = False

    def _client(self) -> Redis:
        if not self._connected or self.redis_client is None:
            raise CacheConnectionError("Redis adapter is not connected")
        return self.redis_client

    @property
    def client(self) -> Redis:
        """Underlying client, shared with the Redis event publisher."""
        return self._client()

    async def get(self, key: str) -> Optional[str]:
        """Get value by key."""
        try:
            return await self._client().get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}")

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set key-value pair with optional TTL."""
        effective_ttl = ttl or self.config.default_ttl
        try:
            await self._client().set(key, value, ex=effective_ttl if effective_ttl > 0 else None)
        except RedisError as e:
            raise CacheError(f"Redis set error for key {key}: {e}")

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._client().exists(key))
        except RedisError as e:
            raise CacheError(f"Redis exists error for key {key}: {e}")

    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        try:
            return await self._client().delete(key) > 0
        except RedisError as e:
            raise CacheError(f"Redis delete error for key {key}: {e}")

    async def delete_many(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        try:
            return await self._client().delete(*keys)
        except RedisError as e:
            raise CacheError(f"Redis delete error for keys {keys}: {e}")

    async def health_check(self) -> bool:
        if not self._connected or self.redis_client is None:
            return False
        try:
            return bool(await self.redis_client.ping())
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
