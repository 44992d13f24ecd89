"""Relational store implementations."""

from .asyncpg_store import AsyncPGStore, AsyncPGSession
from .memory_store import InMemoryStore, InMemorySession

__all__ = [
    "AsyncPGStore",
    "AsyncPGSession",
    "InMemoryStore",
    "InMemorySession",
]
