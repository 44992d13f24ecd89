"""Identity request and response models."""

from .requests import (
    IdentityCreateRequest,
    IdentityUpdateRequest,
    ChangePasswordRequest,
    ChangeStatusRequest,
)
from .responses import IdentityResponse

__all__ = [
    "IdentityCreateRequest",
    "IdentityUpdateRequest",
    "ChangePasswordRequest",
    "ChangeStatusRequest",
    "IdentityResponse",
]
