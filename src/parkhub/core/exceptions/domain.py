"""Domain exceptions for parkhub.

Grouped by taxonomy kind. Errors are raised at the point of detection and
propagate unchanged to the service facade boundary.
"""

from typing import Any, Optional

from .base import ErrorKind, ParkhubError


# Validation Errors
class ValidationError(ParkhubError):
    """Raised when a required field is missing or a field value is invalid."""
    kind = ErrorKind.VALIDATION


class RequiredFieldError(ValidationError):
    """Raised when a required field is missing."""

    def __init__(self, entity_type: str, field_name: str):
        self.entity_type = entity_type
        self.field_name = field_name
        super().__init__(
            f"{entity_type} {field_name} is required",
            details={"entity": entity_type, "field": field_name},
        )


class InvalidReferenceError(ValidationError):
    """Raised when a payload references a related entity that does not exist."""

    def __init__(self, entity_type: str, identifier: Any):
        self.entity_type = entity_type
        self.identifier = str(identifier)
        super().__init__(
            f"Referenced {entity_type} '{identifier}' does not exist",
            details={"entity": entity_type, "id": str(identifier)},
        )


# Not Found Errors
class NotFoundError(ParkhubError):
    """Raised when the targeted entity does not exist."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity_type: str, identifier: Any):
        self.entity_type = entity_type
        self.identifier = str(identifier)
        super().__init__(
            f"{entity_type} with identifier '{identifier}' not found",
            details={"entity": entity_type, "id": str(identifier)},
        )


# Authentication Errors
class AuthenticationError(ParkhubError):
    """Base class for authentication-related errors."""
    kind = ErrorKind.AUTHENTICATION


class InvalidCredentialsError(AuthenticationError):
    """Raised when provided credentials are missing or invalid."""
    pass


class IdentityDisabledError(AuthenticationError):
    """Raised when the identity behind valid credentials is disabled."""
    pass


# Authorization Errors
class AuthorizationError(ParkhubError):
    """Base class for authorization-related errors."""
    kind = ErrorKind.AUTHORIZATION


class OwnershipError(AuthorizationError):
    """Raised when the caller is not the owning identity of the target."""
    pass


class AdminRequiredError(AuthorizationError):
    """Raised when an admin-only operation is invoked by a non-admin."""
    pass


# Conflict Errors
class ConflictError(ParkhubError):
    """Raised when a request conflicts with the current state."""
    kind = ErrorKind.CONFLICT


class PasswordUnchangedError(ConflictError):
    """Raised when a new password equals the stored one."""
    pass


class StatusUnchangedError(ConflictError):
    """Raised when a status change would not change anything."""
    pass


class DuplicateResourceError(ConflictError):
    """Raised when a unique field value is already taken."""

    def __init__(self, entity_type: str, field_name: Optional[str] = None, value: Any = None):
        self.entity_type = entity_type
        self.field_name = field_name
        self.value = value
        if field_name and value is not None:
            target = f"{field_name} '{value}'"
        else:
            target = field_name or "unique value"
        super().__init__(
            f"{entity_type} with {target} already exists",
            details={"entity": entity_type, "field": field_name},
        )


# Store Errors
class StoreError(ParkhubError):
    """Raised when the relational store fails; fatal for the current operation."""
    kind = ErrorKind.STORE


class TransactionError(StoreError):
    """Raised when a transaction cannot be started or committed."""
    pass


class LockTimeoutError(StoreError):
    """Raised when a row lock is not granted within the store's lock timeout."""
    pass


# Cache Errors
class CacheError(ParkhubError):
    """Raised when a cache round-trip fails."""
    kind = ErrorKind.CACHE


class CacheConnectionError(CacheError):
    """Raised when cache connection fails."""
    pass
