"""Parking response models."""

from typing import List, Optional, Sequence

from ....core.projections import AddressShort, CarShort, ParkingWithAddress
from ..entities.parking import Parking


class ParkingResponse(ParkingWithAddress):
    """Parking full projection: address and short projections of parked cars."""
    cars: List[CarShort] = []

    @classmethod
    def from_entities(
        cls,
        parking: Parking,
        address: Optional[AddressShort],
        cars: Sequence[CarShort],
    ) -> "ParkingResponse":
        return cls(id=parking.id.value, price=parking.price, address=address, cars=list(cars))
