"""Car service."""

import logging
from typing import List, Optional

from ....core.exceptions import InvalidReferenceError, NotFoundError
from ....core.projections import CarShort
from ....core.value_objects import CarId, IdentityId, coerce_id
from ...coherence.entities.keys import EntityKind
from ...coherence.services.coordinator import CacheCoordinator
from ...events.services.event_dispatcher import EventDispatcher
from ...identities.repositories.identity_repository import IdentityRepository
from ..entities.car import Car
from ..models.requests import CarCreateRequest, CarUpdateRequest
from ..models.responses import CarResponse
from ..repositories.car_repository import CarRepository

logger = logging.getLogger(__name__)


class CarService:
    """Car operations.

    A car snapshot embeds its owner and its parkings, and both the owner's
    and the parkings' snapshots embed the car, so every car mutation
    invalidates all of them. The car row is locked before the keys are
    collected, so a link committed while waiting for the lock is seen.
    """

    def __init__(self, coordinator: CacheCoordinator, events: Optional[EventDispatcher] = None):
        self._coordinator = coordinator
        self._events = events

    @staticmethod
    async def _require_identity(session, identity_id: IdentityId) -> None:
        """Lock the owning identity so it cannot be deleted before this car commits."""
        if await IdentityRepository(session).lock(identity_id) is None:
            raise InvalidReferenceError("Identity", identity_id)

    async def create(self, request: CarCreateRequest) -> CarResponse:
        car = Car.create(
            brand=request.brand,
            model=request.model,
            description=request.description,
            identity_id=request.identity_id,
        )
        async with self._coordinator.mutation() as scope:
            await self._require_identity(scope.session, car.identity_id)
            repository = CarRepository(scope.session)
            await repository.create(car)
            await self._coordinator.collect_car(scope.session, scope.plan, car.id, [car.identity_id])
            response = await repository.find_car_with_owner_and_parkings(car.id)

        logger.info(f"Created car {car.id} for identity {car.identity_id}")
        if self._events:
            self._events.emit_created(EntityKind.CAR, car.id, response)
        return response

    async def find_all(self) -> List[CarShort]:
        async with self._coordinator.store.transaction(read_only=True) as session:
            cars = await CarRepository(session).find_all()
        return [car.to_short() for car in cars]

    async def find_by_identity(self, identity_id) -> List[CarShort]:
        identity_id = coerce_id(IdentityId, identity_id, "identity_id")
        async with self._coordinator.store.transaction(read_only=True) as session:
            cars = await CarRepository(session).find_by_identity(identity_id)
        return [car.to_short() for car in cars]

    async def find_by_id(self, car_id) -> CarResponse:
        car_id = coerce_id(CarId, car_id, "car_id")

        async def load() -> CarResponse:
            async with self._coordinator.store.transaction(read_only=True) as session:
                response = await CarRepository(session).find_car_with_owner_and_parkings(car_id)
            if response is None:
                raise NotFoundError("Car", car_id)
            return response

        return await self._coordinator.get_or_load(EntityKind.CAR, car_id, CarResponse, load)

    async def update(self, request: CarUpdateRequest) -> CarResponse:
        car_id = coerce_id(CarId, request.id, "id")
        changes = request.model_dump(exclude={"id"}, exclude_none=True)
        async with self._coordinator.mutation() as scope:
            # identity rows are locked before car rows
            if request.identity_id is not None:
                await self._require_identity(scope.session, IdentityId(request.identity_id))
            repository = CarRepository(scope.session)
            car = await repository.get_for_update(car_id)
            updated = car.with_changes(changes)
            await repository.save(updated)
            await self._coordinator.collect_car(
                scope.session, scope.plan, car_id, [car.identity_id, updated.identity_id]
            )
            response = await repository.find_car_with_owner_and_parkings(car_id)

        logger.info(f"Updated car {car_id}: {sorted(changes)}")
        return response

    async def delete(self, car_id) -> None:
        car_id = coerce_id(CarId, car_id, "car_id")
        async with self._coordinator.mutation() as scope:
            repository = CarRepository(scope.session)
            car = await repository.get_for_update(car_id)
            await self._coordinator.collect_car(scope.session, scope.plan, car_id, [car.identity_id])
            await repository.delete(car_id)

        logger.info(f"Deleted car {car_id}")
