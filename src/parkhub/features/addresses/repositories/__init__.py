"""Address repositories."""

from .address_repository import AddressRepository

__all__ = ["AddressRepository"]
