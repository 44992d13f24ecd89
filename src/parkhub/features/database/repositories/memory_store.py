"""In-process relational store with row locks and atomic commit.

Behaves like the PostgreSQL store at READ COMMITTED for the operations the
repositories use: each transaction writes into a private overlay that is
published in one step at commit, ``lock_one``/``update``/``delete`` take
row locks held until the transaction ends, and unique, foreign-key and
ON DELETE rules from the schema are enforced. Used for tests and
single-process deployments.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from ....core.exceptions import (
    StoreError,
    LockTimeoutError,
    ValidationError,
    InvalidReferenceError,
    DuplicateResourceError,
)
from ..entities.protocols import Row
from ..entities.schema import SCHEMA, OnDelete, TableSpec

logger = logging.getLogger(__name__)


class _View:
    """Committed rows overlaid with one session's pending writes."""

    def __init__(self, committed: Dict[str, Dict[Any, Row]], writes: Dict[str, Dict[Any, Optional[Row]]]):
        self._committed = committed
        self._writes = writes

    def get(self, table: str, key: Any) -> Optional[Row]:
        pending = self._writes.get(table, {})
        if key in pending:
            return pending[key]
        return self._committed[table].get(key)

    def rows(self, table: str) -> Iterator[Row]:
        pending = self._writes.get(table, {})
        for key, row in self._committed[table].items():
            if key not in pending:
                yield row
        for row in pending.values():
            if row is not None:
                yield row


class InMemorySession:
    """StoreSession over an InMemoryStore."""

    def __init__(self, store: "InMemoryStore", read_only: bool = False):
        self._store = store
        self._read_only = read_only
        self._writes: Dict[str, Dict[Any, Optional[Row]]] = {}
        self._held: Dict[Tuple[str, Any], asyncio.Lock] = {}
        self._inserted: Set[Tuple[str, Any]] = set()
        self._view = _View(store._tables, self._writes)

    # Helpers

    def _spec(self, table: str) -> TableSpec:
        try:
            return self._store.schema[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}")

    def _id_spec(self, table: str) -> TableSpec:
        spec = self._spec(table)
        if not spec.has_id:
            raise ValueError(f"Table {table} has no id column")
        return spec

    def _ensure_writable(self) -> None:
        if self._read_only:
            raise StoreError("Cannot write in a read-only transaction")

    def _validate_columns(self, spec: TableSpec, columns) -> None:
        unknown = [column for column in columns if column not in spec.columns]
        if unknown:
            raise ValueError(f"Unknown columns for table {spec.name}: {unknown}")

    def _check_not_null(self, spec: TableSpec, row: Row) -> None:
        for column in spec.columns:
            if row.get(column) is None and column not in spec.nullable:
                raise ValidationError(
                    f"{spec.label} {column} must not be null",
                    details={"entity": spec.label, "field": column},
                )

    def _write(self, table: str, key: Any, row: Optional[Row]) -> None:
        self._writes.setdefault(table, {})[key] = row

    async def _acquire(self, table: str, key: Any) -> None:
        if (table, key) in self._held:
            return
        lock = self._store._checkout_lock(table, key)
        acquired = False
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self._store.lock_timeout)
            acquired = True
        except asyncio.TimeoutError:
            raise LockTimeoutError(
                f"Lock on {table} '{key}' not granted within {self._store.lock_timeout}s",
                details={"table": table, "id": str(key)},
            )
        finally:
            if not acquired:
                self._store._return_lock(table, key)
        self._held[(table, key)] = lock

    def release(self) -> None:
        """Release every row lock held by this session."""
        for (table, key), lock in self._held.items():
            lock.release()
            self._store._return_lock(table, key)
        self._held.clear()

    # Reads

    async def fetch_one(self, table: str, row_id: Any) -> Optional[Row]:
        self._id_spec(table)
        row = self._view.get(table, row_id)
        return dict(row) if row is not None else None

    async def fetch_many(self, table: str, where: Optional[Dict[str, Any]] = None) -> List[Row]:
        spec = self._spec(table)
        where = where or {}
        self._validate_columns(spec, where)
        return [
            dict(row)
            for row in self._view.rows(table)
            if all(row.get(column) == value for column, value in where.items())
        ]

    async def lock_one(self, table: str, row_id: Any) -> Optional[Row]:
        self._id_spec(table)
        await self._acquire(table, row_id)
        return await self.fetch_one(table, row_id)

    # Writes

    async def insert(self, table: str, values: Row) -> Row:
        self._ensure_writable()
        spec = self._spec(table)
        self._validate_columns(spec, values)
        row = {column: values.get(column) for column in spec.columns}
        self._check_not_null(spec, row)
        key = spec.row_key(row)
        if self._view.get(table, key) is not None:
            raise DuplicateResourceError(spec.label, field_name=", ".join(spec.primary_key))
        self._store._check_constraints(spec, key, row, self._view)
        if key not in self._writes.get(table, {}):
            self._inserted.add((table, key))
        self._write(table, key, row)
        return dict(row)

    async def update(self, table: str, row_id: Any, values: Row) -> Optional[Row]:
        self._ensure_writable()
        spec = self._id_spec(table)
        self._validate_columns(spec, values)
        if "id" in values and values["id"] != row_id:
            raise ValueError("Primary key cannot be updated")
        await self._acquire(table, row_id)
        current = self._view.get(table, row_id)
        if current is None:
            return None
        row = {**current, **values}
        self._check_not_null(spec, row)
        self._store._check_constraints(spec, row_id, row, self._view)
        self._write(table, row_id, row)
        return dict(row)

    async def delete(self, table: str, row_id: Any) -> bool:
        self._ensure_writable()
        spec = self._id_spec(table)
        await self._acquire(table, row_id)
        if self._view.get(table, row_id) is None:
            return False
        await self._lock_dependents(spec, row_id)
        self._write(table, row_id, None)
        self._store._apply_on_delete(spec, row_id, self._view, self._write)
        return True

    async def delete_where(self, table: str, where: Dict[str, Any]) -> int:
        self._ensure_writable()
        spec = self._spec(table)
        if not where:
            raise ValueError("Refusing to delete without conditions")
        matching = await self.fetch_many(table, where)
        for row in matching:
            key = spec.row_key(row)
            if spec.has_id:
                await self._acquire(table, key)
                await self._lock_dependents(spec, key)
            self._write(table, key, None)
            self._store._apply_on_delete(spec, key, self._view, self._write)
        return len(matching)

    async def _lock_dependents(self, spec: TableSpec, key: Any) -> None:
        """Lock id rows that ON DELETE rules will touch, recursively."""
        for child, fk in self._store._referencing(spec.name):
            if not child.has_id:
                continue
            for dependent in list(self._view.rows(child.name)):
                if dependent.get(fk.column) == key:
                    await self._acquire(child.name, dependent["id"])
                    if fk.on_delete is OnDelete.CASCADE:
                        await self._lock_dependents(child, dependent["id"])

    def commit(self) -> None:
        if self._writes:
            self._store._publish(self._writes, self._inserted)


class InMemoryStore:
    """RelationalStore keeping committed rows in process memory."""

    def __init__(self, schema: Optional[Mapping[str, TableSpec]] = None, lock_timeout: float = 5.0):
        self.schema: Mapping[str, TableSpec] = schema or SCHEMA
        self.lock_timeout = lock_timeout
        self._tables: Dict[str, Dict[Any, Row]] = {name: {} for name in self.schema}
        self._row_locks: Dict[Tuple[str, Any], asyncio.Lock] = {}
        self._lock_users: Dict[Tuple[str, Any], int] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info(f"In-memory store ready with tables: {', '.join(self.schema)}")

    async def close(self) -> None:
        self._connected = False
        logger.info("In-memory store closed")

    async def health_check(self) -> bool:
        return self._connected

    @asynccontextmanager
    async def transaction(self, read_only: bool = False) -> AsyncIterator[InMemorySession]:
        if not self._connected:
            raise StoreError("Store is not connected")
        session = InMemorySession(self, read_only)
        try:
            yield session
            session.commit()
        finally:
            session.release()

    def _checkout_lock(self, table: str, key: Any) -> asyncio.Lock:
        """Row lock for one session; counted until the session returns it."""
        ident = (table, key)
        lock = self._row_locks.get(ident)
        if lock is None:
            lock = self._row_locks[ident] = asyncio.Lock()
        self._lock_users[ident] = self._lock_users.get(ident, 0) + 1
        return lock

    def _return_lock(self, table: str, key: Any) -> None:
        """Drop the row lock once no session holds or waits for it."""
        ident = (table, key)
        remaining = self._lock_users[ident] - 1
        if remaining:
            self._lock_users[ident] = remaining
        else:
            del self._lock_users[ident]
            del self._row_locks[ident]

    def _referencing(self, table: str) -> Iterator[Tuple[TableSpec, Any]]:
        for child in self.schema.values():
            for fk in child.foreign_keys:
                if fk.references == table:
                    yield child, fk

    def _check_constraints(self, spec: TableSpec, key: Any, row: Row, view: _View) -> None:
        for column in spec.unique:
            value = row.get(column)
            if value is None:
                continue
            for other in view.rows(spec.name):
                if other.get(column) == value and spec.row_key(other) != key:
                    raise DuplicateResourceError(spec.label, field_name=column, value=value)
        for fk in spec.foreign_keys:
            value = row.get(fk.column)
            if value is not None and view.get(fk.references, value) is None:
                raise InvalidReferenceError(self.schema[fk.references].label, value)

    def _apply_on_delete(self, spec: TableSpec, key: Any, view: _View, write) -> None:
        for child, fk in self._referencing(spec.name):
            for dependent in list(view.rows(child.name)):
                if dependent.get(fk.column) != key:
                    continue
                dependent_key = child.row_key(dependent)
                if fk.on_delete is OnDelete.CASCADE:
                    write(child.name, dependent_key, None)
                    if child.has_id:
                        self._apply_on_delete(child, dependent_key, view, write)
                else:
                    write(child.name, dependent_key, {**dependent, fk.column: None})

    def _publish(
        self,
        writes: Dict[str, Dict[Any, Optional[Row]]],
        inserted: Iterable[Tuple[str, Any]] = (),
    ) -> None:
        """Validate pending writes against the latest committed rows and publish them.

        Runs without awaiting, so other sessions observe either none or all
        of the writes.
        """
        view = _View(self._tables, writes)

        def write(table: str, key: Any, row: Optional[Row]) -> None:
            writes.setdefault(table, {})[key] = row

        # Rows committed by other sessions after our deletes were computed
        for table, pending in list(writes.items()):
            spec = self.schema[table]
            if not spec.has_id:
                continue
            for key, row in list(pending.items()):
                if row is None:
                    self._apply_on_delete(spec, key, view, write)
        # Keys another session inserted and committed after ours was inserted
        for table, key in inserted:
            if writes.get(table, {}).get(key) is not None and key in self._tables[table]:
                spec = self.schema[table]
                raise DuplicateResourceError(spec.label, field_name=", ".join(spec.primary_key))
        for table, pending in writes.items():
            spec = self.schema[table]
            for key, row in pending.items():
                if row is not None:
                    self._check_constraints(spec, key, row, view)
        for table, pending in writes.items():
            committed = self._tables[table]
            for key, row in pending.items():
                if row is None:
                    committed.pop(key, None)
                else:
                    committed[key] = row
