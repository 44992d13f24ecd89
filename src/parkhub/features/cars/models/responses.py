"""Car response models."""

from typing import List, Sequence

from ....core.projections import CarShort, IdentityShort, ParkingWithAddress
from ..entities.car import Car


class CarResponse(CarShort):
    """Car full projection: owner short projection and parkings with address."""

    identity: IdentityShort
    parkings: List[ParkingWithAddress] = []

    @classmethod
    def from_entities(
        cls,
        car: Car,
        identity: IdentityShort,
        parkings: Sequence[ParkingWithAddress],
    ) -> "CarResponse":
        return cls(**car.to_short().model_dump(), identity=identity, parkings=list(parkings))
