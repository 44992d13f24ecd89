"""In-process cache adapter with LRU eviction and TTL support."""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Optional

from ..entities.config import CacheConfig

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry."""
    value: str
    expires_at: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return time.monotonic() > self.expires_at


class MemoryAdapter:
    """Cache kept in process memory; used in tests and single-process setups."""

    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = config or CacheConfig()
        self._store: "OrderedDict[str, MemoryCacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info(f"Memory cache initialized with max_entries={self.config.max_entries}")

    async def disconnect(self) -> None:
        async with self._lock:
            self._store.clear()
        self._connected = False

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                del self._store[key]
                return None
            self._store.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        effective_ttl = ttl or self.config.default_ttl
        expires_at = time.monotonic() + effective_ttl if effective_ttl > 0 else None
        async with self._lock:
            self._store[key] = MemoryCacheEntry(value=value, expires_at=expires_at)
            self._store.move_to_end(key)
            while len(self._store) > self.config.max_entries:
                evicted, _ = self._store.popitem(last=False)
                logger.debug(f"Evicted cache key {evicted}")

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._store.pop(key, None) is not None

    async def delete_many(self, keys: Iterable[str]) -> int:
        async with self._lock:
            return sum(1 for key in keys if self._store.pop(key, None) is not None)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    async def keys(self) -> list:
        """Live keys, oldest first."""
        async with self._lock:
            return [key for key, entry in self._store.items() if not entry.is_expired]

    async def health_check(self) -> bool:
        return self._connected
