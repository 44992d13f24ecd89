"""Database entities: configuration, protocols and schema."""

from .config import DatabaseConfig
from .protocols import Row, StoreSession, RelationalStore
from .schema import (
    OnDelete,
    ForeignKey,
    TableSpec,
    SCHEMA,
    IDENTITY,
    CAR,
    ADDRESS,
    PARKING,
    PARKING_CAR,
)

__all__ = [
    "DatabaseConfig",
    "Row",
    "StoreSession",
    "RelationalStore",
    "OnDelete",
    "ForeignKey",
    "TableSpec",
    "SCHEMA",
    "IDENTITY",
    "CAR",
    "ADDRESS",
    "PARKING",
    "PARKING_CAR",
]
