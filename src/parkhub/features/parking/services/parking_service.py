"""Parking service, including the car assignment.

Assignment batches lock rows pessimistically before the read-modify-write
of the association: every parking of the batch first, then every car, each
group in ascending id order. All batches therefore acquire locks in the same
global order, which keeps parking-before-car for every pair and rules out
deadlocks between batches that name the same rows in a different order.
"""

import logging
from typing import List, Optional, Sequence

from ....core.exceptions import InvalidReferenceError, NotFoundError, RequiredFieldError
from ....core.projections import ParkingWithAddress
from ....core.value_objects import AddressId, CarId, ParkingId, coerce_id
from ...addresses.entities.address import Address
from ...addresses.repositories.address_repository import AddressRepository
from ...cars.repositories.car_repository import CarRepository
from ...coherence.entities.keys import EntityKind
from ...coherence.services.coordinator import CacheCoordinator
from ...database.entities.protocols import StoreSession
from ...events.services.event_dispatcher import EventDispatcher
from ..entities.parking import Parking, ParkingCarLink
from ..models.requests import (
    ParkingAddressRequest,
    ParkingCarRequest,
    ParkingCreateRequest,
    ParkingUpdateRequest,
)
from ..models.responses import ParkingResponse
from ..repositories.parking_repository import ParkingRepository

logger = logging.getLogger(__name__)


class ParkingService:
    """Parking operations and the car assignment."""

    def __init__(self, coordinator: CacheCoordinator, events: Optional[EventDispatcher] = None):
        self._coordinator = coordinator
        self._events = events

    @staticmethod
    async def _resolve_address(session: StoreSession, request: ParkingAddressRequest) -> AddressId:
        """Existing address by id, or a new address created in the same transaction."""
        repository = AddressRepository(session)
        if request.id is not None:
            address_id = AddressId(request.id)
            if await repository.lock(address_id) is None:
                raise InvalidReferenceError("Address", address_id)
            return address_id
        address = await repository.create(
            Address.create(city=request.city, street=request.street, house=request.house)
        )
        return address.id

    async def create(self, request: ParkingCreateRequest) -> ParkingResponse:
        if request.address is None:
            raise RequiredFieldError("Parking", "address")
        async with self._coordinator.mutation() as scope:
            address_id = await self._resolve_address(scope.session, request.address)
            repository = ParkingRepository(scope.session)
            parking = await repository.create(Parking.create(address_id=address_id, price=request.price))
            scope.plan.add(EntityKind.PARKING, parking.id)
            response = await repository.find_parking_with_address_and_cars(parking.id)

        logger.info(f"Created parking {parking.id} at address {address_id}")
        if self._events:
            self._events.emit_created(EntityKind.PARKING, parking.id, response)
        return response

    async def find_all(self) -> List[ParkingWithAddress]:
        async with self._coordinator.store.transaction(read_only=True) as session:
            return await ParkingRepository(session).find_all_with_address()

    async def find_by_id(self, parking_id) -> ParkingResponse:
        parking_id = coerce_id(ParkingId, parking_id, "parking_id")

        async def load() -> ParkingResponse:
            async with self._coordinator.store.transaction(read_only=True) as session:
                response = await ParkingRepository(session).find_parking_with_address_and_cars(parking_id)
            if response is None:
                raise NotFoundError("Parking", parking_id)
            return response

        return await self._coordinator.get_or_load(EntityKind.PARKING, parking_id, ParkingResponse, load)

    async def update(self, request: ParkingUpdateRequest) -> ParkingResponse:
        parking_id = coerce_id(ParkingId, request.id, "id")
        async with self._coordinator.mutation() as scope:
            # address rows are locked before parking rows
            address_id = None
            if request.address is not None:
                address_id = await self._resolve_address(scope.session, request.address)
            repository = ParkingRepository(scope.session)
            parking = await repository.get_for_update(parking_id)
            await repository.save(parking.with_changes(address_id=address_id, price=request.price))
            await self._coordinator.collect_parking(scope.session, scope.plan, parking_id)
            response = await repository.find_parking_with_address_and_cars(parking_id)

        logger.info(f"Updated parking {parking_id}")
        return response

    async def delete(self, parking_id) -> None:
        parking_id = coerce_id(ParkingId, parking_id, "parking_id")
        async with self._coordinator.mutation() as scope:
            repository = ParkingRepository(scope.session)
            await repository.get_for_update(parking_id)
            await self._coordinator.collect_parking(scope.session, scope.plan, parking_id)
            await repository.delete(parking_id)

        logger.info(f"Deleted parking {parking_id}")

    # Assignment

    async def add_cars(self, requests: Sequence[ParkingCarRequest]) -> None:
        """Associate every pair; pairs already associated are left as they are."""
        await self._mutate_links(requests, add=True)

    async def remove_cars(self, requests: Sequence[ParkingCarRequest]) -> None:
        """Dissociate every pair; pairs not associated are left as they are."""
        await self._mutate_links(requests, add=False)

    @staticmethod
    def _to_link(request: ParkingCarRequest) -> ParkingCarLink:
        return ParkingCarLink(
            parking_id=coerce_id(ParkingId, request.parking_id, "parking_id"),
            car_id=coerce_id(CarId, request.car_id, "car_id"),
        )

    async def _mutate_links(self, requests: Sequence[ParkingCarRequest], add: bool) -> None:
        links = [self._to_link(request) for request in requests]
        if not links:
            return

        async with self._coordinator.mutation() as scope:
            parkings = ParkingRepository(scope.session)
            cars = CarRepository(scope.session)

            # All parkings before all cars, each in id order, so every batch
            # acquires its locks in one global order.
            for parking_id in sorted({link.parking_id for link in links}, key=lambda i: i.value):
                if await parkings.lock(parking_id) is None:
                    raise NotFoundError("Parking", parking_id)
            for car_id in sorted({link.car_id for link in links}, key=lambda i: i.value):
                if await cars.lock(car_id) is None:
                    raise NotFoundError("Car", car_id)

            changed = 0
            for link in links:
                current = set(await parkings.linked_car_ids(link.parking_id))
                if add and link.car_id.value not in current:
                    await parkings.add_link(link)
                    changed += 1
                elif not add and link.car_id.value in current:
                    await parkings.remove_link(link)
                    changed += 1
                self._coordinator.collect_association(scope.plan, link.parking_id, link.car_id)

        logger.info(
            f"{'Added' if add else 'Removed'} {changed} of {len(links)} parking/car links"
        )
