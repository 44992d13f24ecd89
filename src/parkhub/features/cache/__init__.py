"""Cache feature: protocol, configuration and adapters."""

from .entities import Cache, CacheConfig
from .adapters import MemoryAdapter, RedisAdapter

__all__ = ["Cache", "CacheConfig", "MemoryAdapter", "RedisAdapter"]
