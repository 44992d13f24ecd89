"""SQL templates and builders for the relational store.

Identifiers are always taken from the declarative schema, never from
callers, so rendering them into the statement text is safe.
"""

from typing import Any, Dict, List, Sequence, Tuple

from ..entities.schema import SCHEMA, TableSpec

# Basic health check query
BASIC_HEALTH_CHECK = "SELECT 1"

# Transaction-scoped lock wait bound (value rendered from an int)
SET_LOCAL_LOCK_TIMEOUT = "SET LOCAL lock_timeout = '{timeout_ms}ms'"

SELECT_BY_ID = 'SELECT {columns} FROM "{table}" WHERE id = $1'
SELECT_BY_ID_FOR_UPDATE = 'SELECT {columns} FROM "{table}" WHERE id = $1 FOR UPDATE'
SELECT_WHERE = 'SELECT {columns} FROM "{table}"{where}'
INSERT_ROW = 'INSERT INTO "{table}" ({columns}) VALUES ({placeholders}) RETURNING {returning}'
UPDATE_BY_ID = 'UPDATE "{table}" SET {assignments} WHERE id = $1 RETURNING {returning}'
DELETE_BY_ID = 'DELETE FROM "{table}" WHERE id = $1'
DELETE_WHERE = 'DELETE FROM "{table}" WHERE {conditions}'

# Schema DDL, in dependency order
SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS "identity" (
    id UUID PRIMARY KEY,
    authority VARCHAR(16) NOT NULL,
    username VARCHAR(255) NOT NULL UNIQUE,
    password VARCHAR(255) NOT NULL,
    email VARCHAR(255) NOT NULL UNIQUE,
    enabled BOOLEAN NOT NULL DEFAULT TRUE,
    firstname VARCHAR(255) NOT NULL,
    lastname VARCHAR(255) NOT NULL,
    patronymic VARCHAR(255) NOT NULL
);

CREATE TABLE IF NOT EXISTS "car" (
    id UUID PRIMARY KEY,
    brand VARCHAR(255) NOT NULL,
    model VARCHAR(255) NOT NULL UNIQUE,
    description TEXT NOT NULL UNIQUE,
    identity_id UUID NOT NULL REFERENCES "identity"(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS "address" (
    id UUID PRIMARY KEY,
    city VARCHAR(255) NOT NULL,
    street VARCHAR(255) NOT NULL,
    house VARCHAR(255) NOT NULL
);

CREATE TABLE IF NOT EXISTS "parking" (
    id UUID PRIMARY KEY,
    address_id UUID UNIQUE REFERENCES "address"(id) ON DELETE SET NULL,
    price INTEGER NOT NULL DEFAULT 0 CHECK (price >= 0)
);

CREATE TABLE IF NOT EXISTS "parking_car" (
    parking_id UUID NOT NULL REFERENCES "parking"(id) ON DELETE CASCADE,
    car_id UUID NOT NULL REFERENCES "car"(id) ON DELETE CASCADE,
    PRIMARY KEY (parking_id, car_id)
);

CREATE INDEX IF NOT EXISTS idx_car_identity_id ON "car"(identity_id);
CREATE INDEX IF NOT EXISTS idx_parking_car_car_id ON "parking_car"(car_id);
"""


def get_table(table: str) -> TableSpec:
    """Resolve a table name against the schema."""
    try:
        return SCHEMA[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}")


def validate_columns(spec: TableSpec, columns: Sequence[str]) -> None:
    unknown = [column for column in columns if column not in spec.columns]
    if unknown:
        raise ValueError(f"Unknown columns for table {spec.name}: {unknown}")


def column_list(spec: TableSpec) -> str:
    return ", ".join(spec.columns)


def build_select_by_id(table: str, for_update: bool = False) -> str:
    spec = get_table(table)
    template = SELECT_BY_ID_FOR_UPDATE if for_update else SELECT_BY_ID
    return template.format(columns=column_list(spec), table=spec.name)


def build_select_where(table: str, where: Dict[str, Any]) -> Tuple[str, List[Any]]:
    spec = get_table(table)
    validate_columns(spec, list(where))
    clause = ""
    if where:
        conditions = " AND ".join(f"{column} = ${i}" for i, column in enumerate(where, start=1))
        clause = f" WHERE {conditions}"
    query = SELECT_WHERE.format(columns=column_list(spec), table=spec.name, where=clause)
    return query, list(where.values())


def build_insert(table: str, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
    spec = get_table(table)
    validate_columns(spec, list(values))
    placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
    query = INSERT_ROW.format(
        table=spec.name,
        columns=", ".join(values),
        placeholders=placeholders,
        returning=column_list(spec),
    )
    return query, list(values.values())


def build_update(table: str, row_id: Any, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
    spec = get_table(table)
    validate_columns(spec, list(values))
    if not values:
        raise ValueError("Update requires at least one column")
    assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(values, start=2))
    query = UPDATE_BY_ID.format(table=spec.name, assignments=assignments, returning=column_list(spec))
    return query, [row_id, *values.values()]


def build_delete_by_id(table: str) -> str:
    return DELETE_BY_ID.format(table=get_table(table).name)


def build_delete_where(table: str, where: Dict[str, Any]) -> Tuple[str, List[Any]]:
    spec = get_table(table)
    validate_columns(spec, list(where))
    if not where:
        raise ValueError("Refusing to delete without conditions")
    conditions = " AND ".join(f"{column} = ${i}" for i, column in enumerate(where, start=1))
    return DELETE_WHERE.format(table=spec.name, conditions=conditions), list(where.values())


def parse_command_count(status: str) -> int:
    """Row count from an asyncpg command status such as ``DELETE 3``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0
