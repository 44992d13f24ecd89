"""Short projections shared across features.

Full projections embed the short projections of related entities, so these
live in core to be importable from every feature without cycles.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Projection(BaseModel):
    """Base for immutable response projections."""
    model_config = ConfigDict(frozen=True)


class IdentityShort(Projection):
    """Identity short projection (never carries the password)."""
    id: UUID
    username: str
    email: str
    firstname: str
    lastname: str
    patronymic: str


class CarShort(Projection):
    id: UUID
    brand: str
    model: str
    description: str


class AddressShort(Projection):
    id: UUID
    city: str
    street: str
    house: str


class ParkingShort(Projection):
    id: UUID
    price: int = Field(..., ge=0)


class ParkingWithAddress(ParkingShort):
    """Parking short projection extended with its address."""
    address: Optional[AddressShort] = None
