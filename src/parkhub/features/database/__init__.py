"""Database feature: relational store protocols, schema and implementations."""

from .entities import (
    DatabaseConfig,
    Row,
    StoreSession,
    RelationalStore,
    TableSpec,
    SCHEMA,
)
from .repositories import AsyncPGStore, InMemoryStore

__all__ = [
    "DatabaseConfig",
    "Row",
    "StoreSession",
    "RelationalStore",
    "TableSpec",
    "SCHEMA",
    "AsyncPGStore",
    "InMemoryStore",
]
