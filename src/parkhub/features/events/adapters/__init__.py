"""Event publisher adapters."""

from .logging_publisher import LoggingEventPublisher
from .redis_publisher import RedisEventPublisher

__all__ = ["LoggingEventPublisher", "RedisEventPublisher"]
