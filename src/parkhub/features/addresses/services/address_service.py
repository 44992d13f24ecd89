"""Address service.

Address snapshots are not cached, but a parking snapshot embeds its address
and a car snapshot embeds its parkings' addresses, so address updates and
deletes invalidate the parking placed there and that parking's cars. The
address row and then its parking are locked before those keys are collected.
"""

import logging
from typing import List

from ....core.exceptions import NotFoundError
from ....core.projections import AddressShort
from ....core.value_objects import AddressId, coerce_id
from ...coherence.services.coordinator import CacheCoordinator
from ..entities.address import Address
from ..models.requests import AddressCreateRequest, AddressUpdateRequest
from ..models.responses import AddressResponse
from ..repositories.address_repository import AddressRepository

logger = logging.getLogger(__name__)


class AddressService:

    def __init__(self, coordinator: CacheCoordinator):
        self._coordinator = coordinator

    async def create(self, request: AddressCreateRequest) -> AddressResponse:
        address = Address.create(city=request.city, street=request.street, house=request.house)
        async with self._coordinator.mutation() as scope:
            address = await AddressRepository(scope.session).create(address)

        logger.info(f"Created address {address.id}")
        return AddressResponse.from_entities(address, None)

    async def find_all(self) -> List[AddressShort]:
        async with self._coordinator.store.transaction(read_only=True) as session:
            addresses = await AddressRepository(session).find_all()
        return [address.to_short() for address in addresses]

    async def find_by_id(self, address_id) -> AddressResponse:
        address_id = coerce_id(AddressId, address_id, "address_id")
        async with self._coordinator.store.transaction(read_only=True) as session:
            response = await AddressRepository(session).find_address_with_parking(address_id)
        if response is None:
            raise NotFoundError("Address", address_id)
        return response

    async def update(self, request: AddressUpdateRequest) -> AddressResponse:
        address_id = coerce_id(AddressId, request.id, "id")
        changes = request.model_dump(exclude={"id"}, exclude_none=True)
        async with self._coordinator.mutation() as scope:
            repository = AddressRepository(scope.session)
            address = await repository.get_for_update(address_id)
            await repository.lock_parkings(address_id)
            await repository.save(address.with_changes(changes))
            await self._coordinator.collect_address(scope.session, scope.plan, address_id)
            response = await repository.find_address_with_parking(address_id)

        logger.info(f"Updated address {address_id}: {sorted(changes)}")
        return response

    async def delete(self, address_id) -> None:
        address_id = coerce_id(AddressId, address_id, "address_id")
        async with self._coordinator.mutation() as scope:
            repository = AddressRepository(scope.session)
            await repository.get_for_update(address_id)
            await repository.lock_parkings(address_id)
            await self._coordinator.collect_address(scope.session, scope.plan, address_id)
            await repository.delete(address_id)

        logger.info(f"Deleted address {address_id}")
