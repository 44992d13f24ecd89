"""Translation of driver errors into parkhub store exceptions."""

import logging
from typing import Optional

import asyncpg

from ....core.exceptions import (
    ParkhubError,
    StoreError,
    TransactionError,
    LockTimeoutError,
    ValidationError,
    InvalidReferenceError,
    DuplicateResourceError,
)
from ..entities.schema import SCHEMA

logger = logging.getLogger(__name__)


def _entity_for(table_name: Optional[str]) -> str:
    spec = SCHEMA.get(table_name or "")
    return spec.label if spec else (table_name or "row")


def _field_from_constraint(table_name: Optional[str], constraint: Optional[str]) -> Optional[str]:
    """Postgres names unique constraints ``<table>_<column>_key``."""
    if not constraint:
        return None
    name = constraint
    if table_name and name.startswith(f"{table_name}_"):
        name = name[len(table_name) + 1:]
    for suffix in ("_key", "_fkey"):
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def translate_postgres_error(error: Exception) -> ParkhubError:
    """Map an asyncpg error to the store exception hierarchy."""
    table_name = getattr(error, "table_name", None)
    constraint = getattr(error, "constraint_name", None)
    detail = getattr(error, "detail", None)

    if isinstance(error, asyncpg.exceptions.UniqueViolationError):
        return DuplicateResourceError(
            _entity_for(table_name),
            field_name=_field_from_constraint(table_name, constraint),
        )
    if isinstance(error, asyncpg.exceptions.ForeignKeyViolationError):
        spec = SCHEMA.get(table_name or "")
        column = _field_from_constraint(table_name, constraint)
        fk = spec.foreign_key_for(column) if spec and column else None
        referenced = _entity_for(fk.references) if fk else "row"
        return InvalidReferenceError(referenced, detail or column or "unknown")
    if isinstance(error, (asyncpg.exceptions.CheckViolationError,
                          asyncpg.exceptions.NotNullViolationError)):
        return ValidationError(
            f"Constraint violated on {_entity_for(table_name)}: {constraint or error}",
            details={"constraint": constraint, "detail": detail},
        )
    if isinstance(error, (asyncpg.exceptions.LockNotAvailableError,
                          asyncpg.exceptions.QueryCanceledError)):
        return LockTimeoutError(f"Lock wait timed out: {error}")
    if isinstance(error, (asyncpg.exceptions.DeadlockDetectedError,
                          asyncpg.exceptions.SerializationError)):
        return TransactionError(f"Transaction aborted: {error}")

    logger.error(f"Unhandled store error {type(error).__name__}: {error}")
    return StoreError(f"Store operation failed: {error}")
