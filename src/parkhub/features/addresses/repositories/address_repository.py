"""Address repository bound to one store session."""

from typing import List, Optional

from ....core.exceptions import NotFoundError
from ....core.value_objects import AddressId
from ...database.entities.protocols import StoreSession
from ...database.entities.schema import ADDRESS, PARKING
from ...parking.entities.parking import Parking
from ..entities.address import Address
from ..models.responses import AddressResponse


class AddressRepository:
    """CRUD and eager loaders for addresses."""

    def __init__(self, session: StoreSession):
        self._session = session

    async def create(self, address: Address) -> Address:
        return Address.from_row(await self._session.insert(ADDRESS, address.to_row()))

    async def find_by_id(self, address_id: AddressId) -> Optional[Address]:
        row = await self._session.fetch_one(ADDRESS, address_id.value)
        return Address.from_row(row) if row else None

    async def get(self, address_id: AddressId) -> Address:
        address = await self.find_by_id(address_id)
        if address is None:
            raise NotFoundError("Address", address_id)
        return address

    async def lock(self, address_id: AddressId) -> Optional[Address]:
        """Load the address holding its row lock until the transaction ends."""
        row = await self._session.lock_one(ADDRESS, address_id.value)
        return Address.from_row(row) if row else None

    async def get_for_update(self, address_id: AddressId) -> Address:
        address = await self.lock(address_id)
        if address is None:
            raise NotFoundError("Address", address_id)
        return address

    async def lock_parkings(self, address_id: AddressId) -> List[Parking]:
        """Lock the parking placed at the address, if any."""
        rows = await self._session.fetch_many(PARKING, {"address_id": address_id.value})
        locked = []
        for parking_id in sorted(row["id"] for row in rows):
            row = await self._session.lock_one(PARKING, parking_id)
            if row is not None:
                locked.append(Parking.from_row(row))
        return locked

    async def find_all(self) -> List[Address]:
        return [Address.from_row(row) for row in await self._session.fetch_many(ADDRESS)]

    async def save(self, address: Address) -> Address:
        values = address.to_row()
        values.pop("id")
        row = await self._session.update(ADDRESS, address.id.value, values)
        if row is None:
            raise NotFoundError("Address", address.id)
        return Address.from_row(row)

    async def delete(self, address_id: AddressId) -> bool:
        """Delete the address; a parking placed there keeps existing without one."""
        return await self._session.delete(ADDRESS, address_id.value)

    async def find_address_with_parking(self, address_id: AddressId) -> Optional[AddressResponse]:
        address = await self.find_by_id(address_id)
        if address is None:
            return None
        rows = await self._session.fetch_many(PARKING, {"address_id": address_id.value})
        parking = Parking.from_row(rows[0]).to_short() if rows else None
        return AddressResponse.from_entities(address, parking)
