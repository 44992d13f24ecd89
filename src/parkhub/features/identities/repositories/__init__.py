"""Identity repositories."""

from .identity_repository import IdentityRepository

__all__ = ["IdentityRepository"]
