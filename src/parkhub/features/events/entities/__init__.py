"""Event entities."""

from .created_event import EntityCreatedEvent
from .protocols import EventPublisher

__all__ = ["EntityCreatedEvent", "EventPublisher"]
