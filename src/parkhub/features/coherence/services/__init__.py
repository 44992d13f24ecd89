"""Coherence services."""

from .coordinator import CacheCoordinator

__all__ = ["CacheCoordinator"]
