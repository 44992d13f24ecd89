"""Result type returned at the service facade boundary.

Inside the service layer errors are raised where they are detected; the
facade converts the outcome of every operation into an ``OperationResult``
so the transport layer can branch on ``ok`` instead of catching.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..exceptions import ErrorKind, ParkhubError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a facade operation: a value or a taxonomy error."""

    value: Optional[T] = None
    error: Optional[ParkhubError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ParkhubError) -> "OperationResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Taxonomy kind of the error, None on success."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> Optional[T]:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
