"""Relational store protocols for parkhub.

Every repository works against a ``StoreSession`` obtained from
``RelationalStore.transaction()``. A session is one atomic transaction:
its writes become visible to other sessions only when the ``async with``
block exits normally, and are discarded if it exits with an exception.
"""

from abc import abstractmethod
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, runtime_checkable

Row = Dict[str, Any]


@runtime_checkable
class StoreSession(Protocol):
    """Table-level operations available inside one transaction."""

    @abstractmethod
    async def fetch_one(self, table: str, row_id: Any) -> Optional[Row]:
        """Fetch a row by id, None when absent."""
        ...

    @abstractmethod
    async def fetch_many(self, table: str, where: Optional[Dict[str, Any]] = None) -> List[Row]:
        """Fetch rows matching all equality conditions in ``where``."""
        ...

    @abstractmethod
    async def lock_one(self, table: str, row_id: Any) -> Optional[Row]:
        """Fetch a row by id holding an exclusive row lock until the transaction ends."""
        ...

    @abstractmethod
    async def insert(self, table: str, values: Row) -> Row:
        """Insert a row and return it."""
        ...

    @abstractmethod
    async def update(self, table: str, row_id: Any, values: Row) -> Optional[Row]:
        """Overwrite the given columns of a row; None when the row is absent."""
        ...

    @abstractmethod
    async def delete(self, table: str, row_id: Any) -> bool:
        """Delete a row by id applying ON DELETE rules; False when absent."""
        ...

    @abstractmethod
    async def delete_where(self, table: str, where: Dict[str, Any]) -> int:
        """Delete rows matching all equality conditions; returns the count."""
        ...


@runtime_checkable
class RelationalStore(Protocol):
    """Transactional relational store with explicit lifecycle."""

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @abstractmethod
    def transaction(self, read_only: bool = False) -> AsyncContextManager[StoreSession]:
        """Open a transaction at the configured isolation level."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...
