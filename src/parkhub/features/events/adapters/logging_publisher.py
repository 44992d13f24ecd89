"""Event publisher that only logs; used when no external sink is configured."""

import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class LoggingEventPublisher:
    """Logs each event and keeps the last ones for inspection."""

    def __init__(self, keep: int = 100):
        self._keep = keep
        self.published: List[Tuple[str, str]] = []

    async def publish(self, channel: str, message: str) -> None:
        logger.info(f"Event on {channel}: {message}")
        self.published.append((channel, message))
        del self.published[:-self._keep]
