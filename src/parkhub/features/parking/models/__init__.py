"""Parking request and response models."""

from .requests import (
    ParkingAddressRequest,
    ParkingCreateRequest,
    ParkingUpdateRequest,
    ParkingCarRequest,
)
from .responses import ParkingResponse

__all__ = [
    "ParkingAddressRequest",
    "ParkingCreateRequest",
    "ParkingUpdateRequest",
    "ParkingCarRequest",
    "ParkingResponse",
]
