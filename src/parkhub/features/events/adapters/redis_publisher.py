"""Redis pub/sub event publisher."""

import logging

from ...cache.adapters.redis_adapter import RedisAdapter

logger = logging.getLogger(__name__)


class RedisEventPublisher:
    """Publishes messages on Redis channels through the cache adapter's client."""

    def __init__(self, adapter: RedisAdapter):
        self._adapter = adapter

    async def publish(self, channel: str, message: str) -> None:
        receivers = await self._adapter.client.publish(channel, message)
        logger.debug(f"Published event on {channel} to {receivers} subscribers")
