"""Event services."""

from .event_dispatcher import EventDispatcher

__all__ = ["EventDispatcher"]
