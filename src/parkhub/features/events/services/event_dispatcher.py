"""Background dispatch of entity-created events.

Delivery is not part of any operation's outcome: each event is published
from its own task and a failed delivery is only logged.
"""

import asyncio
import logging
from typing import Any, Set

from pydantic import BaseModel

from ...coherence.entities.keys import EntityKind
from ..entities.created_event import EntityCreatedEvent
from ..entities.protocols import EventPublisher

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Schedules publication of created-entity snapshots."""

    def __init__(self, publisher: EventPublisher, channel_prefix: str = "", enabled: bool = True):
        self._publisher = publisher
        self._channel_prefix = channel_prefix
        self._enabled = enabled
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def emit_created(self, kind: EntityKind, entity_id: Any, snapshot: BaseModel) -> None:
        """Schedule the event and return immediately."""
        if not self._enabled:
            return
        event = EntityCreatedEvent(kind=kind, entity_id=entity_id, payload=snapshot.model_dump_json())
        task = asyncio.create_task(self._deliver(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, event: EntityCreatedEvent) -> None:
        channel = event.channel(self._channel_prefix)
        try:
            await self._publisher.publish(channel, event.to_message())
        except Exception as e:
            logger.warning(f"Failed to publish '{event.name}' for {event.entity_id} on {channel}: {e}")

    async def drain(self) -> None:
        """Wait for scheduled deliveries; called on shutdown."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
