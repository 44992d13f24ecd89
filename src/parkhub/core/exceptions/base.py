"""Base exceptions for parkhub.

This module defines the root of the exception hierarchy. Every exception
carries an error code, structured details and the taxonomy kind that the
transport layer maps to a caller-visible response.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Taxonomy kinds attached to every parkhub error."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    STORE = "store"
    CACHE = "cache"


class ParkhubError(Exception):
    """Base exception for all parkhub errors.

    Subclasses set ``kind``; instances include structured error information
    for better debugging and API responses.
    """

    kind: ErrorKind = ErrorKind.STORE

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: ParkhubError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The parkhub exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "kind": exception.kind.value,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
