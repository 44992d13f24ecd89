"""Event sink protocol."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class EventPublisher(Protocol):
    """External sink receiving serialized event messages."""

    @abstractmethod
    async def publish(self, channel: str, message: str) -> None:
        """Deliver one message on ``channel``."""
        ...
