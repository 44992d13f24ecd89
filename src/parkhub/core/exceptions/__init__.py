"""Exceptions module for parkhub.

This module provides the complete exception hierarchy for parkhub,
organized by taxonomy kind.
"""

from .base import (
    ErrorKind,
    ParkhubError,
    create_error_response,
)

from .domain import (
    # Validation Errors
    ValidationError,
    RequiredFieldError,
    InvalidReferenceError,

    # Not Found Errors
    NotFoundError,

    # Authentication Errors
    AuthenticationError,
    InvalidCredentialsError,
    IdentityDisabledError,

    # Authorization Errors
    AuthorizationError,
    OwnershipError,
    AdminRequiredError,

    # Conflict Errors
    ConflictError,
    PasswordUnchangedError,
    StatusUnchangedError,
    DuplicateResourceError,

    # Store Errors
    StoreError,
    TransactionError,
    LockTimeoutError,

    # Cache Errors
    CacheError,
    CacheConnectionError,
)

__all__ = [
    "ErrorKind",
    "ParkhubError",
    "create_error_response",
    "ValidationError",
    "RequiredFieldError",
    "InvalidReferenceError",
    "NotFoundError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "IdentityDisabledError",
    "AuthorizationError",
    "OwnershipError",
    "AdminRequiredError",
    "ConflictError",
    "PasswordUnchangedError",
    "StatusUnchangedError",
    "DuplicateResourceError",
    "StoreError",
    "TransactionError",
    "LockTimeoutError",
    "CacheError",
    "CacheConnectionError",
]
