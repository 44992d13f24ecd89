"""Auth entities."""

from .caller import AuthenticatedCaller, Credentials
from .decision import AccessDecision
from .policies import (
    AccessPolicy,
    Operation,
    OperationSpec,
    OwnershipTarget,
    OPERATIONS,
    get_operation_spec,
)

__all__ = [
    "AuthenticatedCaller",
    "Credentials",
    "AccessDecision",
    "AccessPolicy",
    "Operation",
    "OperationSpec",
    "OwnershipTarget",
    "OPERATIONS",
    "get_operation_spec",
]
