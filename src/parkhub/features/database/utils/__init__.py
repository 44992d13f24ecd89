"""Database utilities: SQL builders and error translation."""

from .queries import (
    BASIC_HEALTH_CHECK,
    SCHEMA_DDL,
    build_select_by_id,
    build_select_where,
    build_insert,
    build_update,
    build_delete_by_id,
    build_delete_where,
    parse_command_count,
)
from .error_handling import translate_postgres_error

__all__ = [
    "BASIC_HEALTH_CHECK",
    "SCHEMA_DDL",
    "build_select_by_id",
    "build_select_where",
    "build_insert",
    "build_update",
    "build_delete_by_id",
    "build_delete_where",
    "parse_command_count",
    "translate_postgres_error",
]
