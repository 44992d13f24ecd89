"""Declarative relational schema shared by every store implementation.

The asyncpg store renders it into DDL and SQL; the in-memory store uses it
to enforce the same unique, foreign-key and ON DELETE rules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class OnDelete(str, Enum):
    """Referential action applied when a referenced row is deleted."""
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"


@dataclass(frozen=True)
class ForeignKey:
    """Foreign key from ``column`` to ``references``.id."""
    column: str
    references: str
    on_delete: OnDelete


@dataclass(frozen=True)
class TableSpec:
    """Table definition: columns, primary key, unique columns and foreign keys."""
    name: str
    columns: Tuple[str, ...]
    primary_key: Tuple[str, ...] = ("id",)
    unique: Tuple[str, ...] = ()
    nullable: Tuple[str, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    entity_type: str = ""

    def __post_init__(self):
        unknown = set(self.primary_key + self.unique + self.nullable) - set(self.columns)
        unknown |= {fk.column for fk in self.foreign_keys} - set(self.columns)
        if unknown:
            raise ValueError(f"Table {self.name} references unknown columns: {sorted(unknown)}")

    @property
    def has_id(self) -> bool:
        return self.primary_key == ("id",)

    @property
    def label(self) -> str:
        """Entity name used in error messages."""
        return self.entity_type or self.name

    def row_key(self, row: Dict) -> object:
        """Primary key value of a row (scalar for id tables, tuple otherwise)."""
        if self.has_id:
            return row["id"]
        return tuple(row[column] for column in self.primary_key)

    def foreign_key_for(self, column: str) -> Optional[ForeignKey]:
        for fk in self.foreign_keys:
            if fk.column == column:
                return fk
        return None


IDENTITY = "identity"
CAR = "car"
ADDRESS = "address"
PARKING = "parking"
PARKING_CAR = "parking_car"


IDENTITY_TABLE = TableSpec(
    name=IDENTITY,
    columns=("id", "authority", "username", "password", "email", "enabled",
             "firstname", "lastname", "patronymic"),
    unique=("username", "email"),
    entity_type="Identity",
)

CAR_TABLE = TableSpec(
    name=CAR,
    columns=("id", "brand", "model", "description", "identity_id"),
    unique=("model", "description"),
    foreign_keys=(ForeignKey("identity_id", IDENTITY, OnDelete.CASCADE),),
    entity_type="Car",
)

ADDRESS_TABLE = TableSpec(
    name=ADDRESS,
    columns=("id", "city", "street", "house"),
    entity_type="Address",
)

PARKING_TABLE = TableSpec(
    name=PARKING,
    columns=("id", "address_id", "price"),
    unique=("address_id",),
    nullable=("address_id",),
    foreign_keys=(ForeignKey("address_id", ADDRESS, OnDelete.SET_NULL),),
    entity_type="Parking",
)

PARKING_CAR_TABLE = TableSpec(
    name=PARKING_CAR,
    columns=("parking_id", "car_id"),
    primary_key=("parking_id", "car_id"),
    foreign_keys=(
        ForeignKey("parking_id", PARKING, OnDelete.CASCADE),
        ForeignKey("car_id", CAR, OnDelete.CASCADE),
    ),
    entity_type="ParkingCar",
)

# Declaration order is dependency order (referenced tables first)
SCHEMA: Dict[str, TableSpec] = {
    table.name: table
    for table in (IDENTITY_TABLE, CAR_TABLE, ADDRESS_TABLE, PARKING_TABLE, PARKING_CAR_TABLE)
}
