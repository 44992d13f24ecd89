"""Cache protocol for parkhub.

Values are serialized snapshots (JSON text). Deleting an absent key is a
no-op, so invalidation can be issued for keys that were never populated.
"""

from abc import abstractmethod
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Cache(Protocol):
    """Key/value cache used for read-through snapshot caching."""

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get value by key, None on miss."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set value with optional TTL in seconds."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        ...

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys in one round-trip; returns how many existed."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...
