"""Cache configuration for parkhub."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class CacheConfig:
    """Connection settings for the cache backend."""

    url: str = "redis://localhost:6379/0"
    socket_timeout: float = 5.0
    connect_timeout: float = 5.0
    max_connections: int = 20
    default_ttl: int = 0
    max_entries: int = 10000

    def __post_init__(self):
        if self.default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        if self.max_entries < 1:
            raise ValueError("max_entries must be >= 1")

    @classmethod
    def from_settings(cls, settings) -> "CacheConfig":
        """Build from ParkhubSettings."""
        return cls(
            url=settings.redis_url,
            socket_timeout=settings.redis_socket_timeout,
            connect_timeout=settings.redis_connect_timeout,
            max_connections=settings.redis_max_connections,
            default_ttl=settings.cache_default_ttl,
            max_entries=settings.cache_max_entries,
        )

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``redis.asyncio.ConnectionPool.from_url``."""
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.connect_timeout,
            "decode_responses": True,
        }

    @property
    def safe_url(self) -> str:
        """URL without credentials for logging."""
        if "@" in self.url:
            scheme, _, rest = self.url.partition("://")
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.url
