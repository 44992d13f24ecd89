"""Address response models."""

from typing import Optional

from ....core.projections import AddressShort, ParkingShort
from ..entities.address import Address


class AddressResponse(AddressShort):
    """Address full projection with the parking placed there, if any."""
    parking: Optional[ParkingShort] = None

    @classmethod
    def from_entities(cls, address: Address, parking: Optional[ParkingShort]) -> "AddressResponse":
        return cls(**address.to_short().model_dump(), parking=parking)
