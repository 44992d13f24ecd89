"""Cache entities."""

from .config import CacheConfig
from .protocols import Cache

__all__ = ["Cache", "CacheConfig"]
