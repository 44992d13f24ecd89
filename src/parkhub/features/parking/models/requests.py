"""Parking request models."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ParkingAddressRequest(BaseModel):
    """Either ``id`` of an existing address or the fields of a new one."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    city: Optional[str] = None
    street: Optional[str] = None
    house: Optional[str] = None


class ParkingCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    address: Optional[ParkingAddressRequest] = None
    price: Optional[int] = None


class ParkingUpdateRequest(BaseModel):
    """Partial update; a supplied address switches to or creates that address."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    address: Optional[ParkingAddressRequest] = None
    price: Optional[int] = None


class ParkingCarRequest(BaseModel):
    """One (parking, car) pair of an add/remove batch."""
    model_config = ConfigDict(extra="forbid")

    parking_id: Optional[UUID] = None
    car_id: Optional[UUID] = None
