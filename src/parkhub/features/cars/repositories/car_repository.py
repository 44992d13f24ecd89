"""Car repository bound to one store session."""

from typing import List, Optional

from ....core.exceptions import NotFoundError
from ....core.value_objects import CarId, IdentityId
from ...addresses.entities.address import Address
from ...database.entities.protocols import StoreSession
from ...database.entities.schema import ADDRESS, CAR, IDENTITY, PARKING, PARKING_CAR
from ...identities.entities.identity import Identity
from ...parking.entities.parking import Parking
from ..entities.car import Car
from ..models.responses import CarResponse


class CarRepository:
    """CRUD and eager loaders for cars."""

    def __init__(self, session: StoreSession):
        self._session = session

    async def create(self, car: Car) -> Car:
        return Car.from_row(await self._session.insert(CAR, car.to_row()))

    async def find_by_id(self, car_id: CarId) -> Optional[Car]:
        row = await self._session.fetch_one(CAR, car_id.value)
        return Car.from_row(row) if row else None

    async def get(self, car_id: CarId) -> Car:
        car = await self.find_by_id(car_id)
        if car is None:
            raise NotFoundError("Car", car_id)
        return car

    async def lock(self, car_id: CarId) -> Optional[Car]:
        """Load the car holding its row lock until the transaction ends."""
        row = await self._session.lock_one(CAR, car_id.value)
        return Car.from_row(row) if row else None

    async def get_for_update(self, car_id: CarId) -> Car:
        car = await self.lock(car_id)
        if car is None:
            raise NotFoundError("Car", car_id)
        return car

    async def find_all(self) -> List[Car]:
        return [Car.from_row(row) for row in await self._session.fetch_many(CAR)]

    async def find_by_identity(self, identity_id: IdentityId) -> List[Car]:
        rows = await self._session.fetch_many(CAR, {"identity_id": identity_id.value})
        return [Car.from_row(row) for row in rows]

    async def save(self, car: Car) -> Car:
        values = car.to_row()
        values.pop("id")
        row = await self._session.update(CAR, car.id.value, values)
        if row is None:
            raise NotFoundError("Car", car.id)
        return Car.from_row(row)

    async def delete(self, car_id: CarId) -> bool:
        """Delete the car; its parking links cascade."""
        return await self._session.delete(CAR, car_id.value)

    async def find_car_with_owner_and_parkings(self, car_id: CarId) -> Optional[CarResponse]:
        """Full projection: the car, its owner and its parkings with their addresses."""
        car = await self.find_by_id(car_id)
        if car is None:
            return None
        owner = Identity.from_row(await self._session.fetch_one(IDENTITY, car.identity_id.value))
        parkings = []
        for link in await self._session.fetch_many(PARKING_CAR, {"car_id": car_id.value}):
            parking = Parking.from_row(await self._session.fetch_one(PARKING, link["parking_id"]))
            address = None
            if parking.address_id is not None:
                address_row = await self._session.fetch_one(ADDRESS, parking.address_id.value)
                address = Address.from_row(address_row).to_short() if address_row else None
            parkings.append(parking.with_address(address))
        return CarResponse.from_entities(car, owner.to_short(), parkings)
