"""Parking repository bound to one store session."""

from typing import List, Optional
from uuid import UUID

from ....core.exceptions import NotFoundError
from ....core.projections import AddressShort, ParkingWithAddress
from ....core.value_objects import AddressId, ParkingId
from ...addresses.entities.address import Address
from ...cars.entities.car import Car
from ...database.entities.protocols import StoreSession
from ...database.entities.schema import ADDRESS, CAR, PARKING, PARKING_CAR
from ..entities.parking import Parking, ParkingCarLink
from ..models.responses import ParkingResponse


class ParkingRepository:
    """CRUD, eager loaders and the car assignment for parkings."""

    def __init__(self, session: StoreSession):
        self._session = session

    async def create(self, parking: Parking) -> Parking:
        return Parking.from_row(await self._session.insert(PARKING, parking.to_row()))

    async def find_by_id(self, parking_id: ParkingId) -> Optional[Parking]:
        row = await self._session.fetch_one(PARKING, parking_id.value)
        return Parking.from_row(row) if row else None

    async def get(self, parking_id: ParkingId) -> Parking:
        parking = await self.find_by_id(parking_id)
        if parking is None:
            raise NotFoundError("Parking", parking_id)
        return parking

    async def lock(self, parking_id: ParkingId) -> Optional[Parking]:
        """Load the parking holding its row lock until the transaction ends."""
        row = await self._session.lock_one(PARKING, parking_id.value)
        return Parking.from_row(row) if row else None

    async def get_for_update(self, parking_id: ParkingId) -> Parking:
        parking = await self.lock(parking_id)
        if parking is None:
            raise NotFoundError("Parking", parking_id)
        return parking

    async def find_by_address(self, address_id: AddressId) -> Optional[Parking]:
        rows = await self._session.fetch_many(PARKING, {"address_id": address_id.value})
        return Parking.from_row(rows[0]) if rows else None

    async def save(self, parking: Parking) -> Parking:
        values = parking.to_row()
        values.pop("id")
        row = await self._session.update(PARKING, parking.id.value, values)
        if row is None:
            raise NotFoundError("Parking", parking.id)
        return Parking.from_row(row)

    async def delete(self, parking_id: ParkingId) -> bool:
        """Delete the parking; its car links cascade."""
        return await self._session.delete(PARKING, parking_id.value)

    async def _address_short(self, parking: Parking) -> Optional[AddressShort]:
        if parking.address_id is None:
            return None
        row = await self._session.fetch_one(ADDRESS, parking.address_id.value)
        return Address.from_row(row).to_short() if row else None

    async def find_all_with_address(self) -> List[ParkingWithAddress]:
        parkings = [Parking.from_row(row) for row in await self._session.fetch_many(PARKING)]
        return [parking.with_address(await self._address_short(parking)) for parking in parkings]

    async def find_parking_with_address_and_cars(self, parking_id: ParkingId) -> Optional[ParkingResponse]:
        """Full projection: the parking, its address and its cars."""
        parking = await self.find_by_id(parking_id)
        if parking is None:
            return None
        cars = []
        for car_id in await self.linked_car_ids(parking_id):
            row = await self._session.fetch_one(CAR, car_id)
            if row:
                cars.append(Car.from_row(row).to_short())
        return ParkingResponse.from_entities(parking, await self._address_short(parking), cars)

    # Assignment

    async def linked_car_ids(self, parking_id: ParkingId) -> List[UUID]:
        rows = await self._session.fetch_many(PARKING_CAR, {"parking_id": parking_id.value})
        return [row["car_id"] for row in rows]

    async def add_link(self, link: ParkingCarLink) -> None:
        await self._session.insert(PARKING_CAR, link.to_row())

    async def remove_link(self, link: ParkingCarLink) -> None:
        await self._session.delete_where(PARKING_CAR, link.to_row())
