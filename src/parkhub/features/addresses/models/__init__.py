"""Address request and response models."""

from .requests import AddressCreateRequest, AddressUpdateRequest
from .responses import AddressResponse

__all__ = ["AddressCreateRequest", "AddressUpdateRequest", "AddressResponse"]
