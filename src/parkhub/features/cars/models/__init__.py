"""Car request and response models."""

from .requests import CarCreateRequest, CarUpdateRequest
from .responses import CarResponse

__all__ = ["CarCreateRequest", "CarUpdateRequest", "CarResponse"]
