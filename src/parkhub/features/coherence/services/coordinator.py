"""Cache-aside coordinator with eager invalidation.

Reads go through ``get_or_load``: a hit is deserialized and returned without
touching the store, a miss loads the full projection, caches it without
expiry and returns it. Writes never touch cached values. Every mutation runs
in ``mutation()``, collects the keys whose snapshots embed the changed rows
into an InvalidationPlan while its transaction is open, and the plan is
deleted from the cache only after the transaction commits. A rolled back
mutation invalidates nothing.

Snapshot embedding that drives the closures:

* identity full -> short cars
* car full -> short owner, parkings with address
* parking full -> short address, short cars
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Type, TypeVar

from pydantic import BaseModel

from ...cache.entities.protocols import Cache
from ...database.entities.protocols import RelationalStore, StoreSession
from ...database.entities.schema import CAR, PARKING, PARKING_CAR
from ..entities.keys import EntityKind, CACHED_KINDS, cache_key
from ..entities.plan import InvalidationPlan, MutationScope

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _raw(entity_id: Any) -> Any:
    return getattr(entity_id, "value", entity_id)


class CacheCoordinator:
    """Keeps cached full projections coherent with relational mutations."""

    def __init__(self, store: RelationalStore, cache: Cache):
        self._store = store
        self._cache = cache

    @property
    def store(self) -> RelationalStore:
        return self._store

    # Reads

    async def get_or_load(
        self,
        kind: EntityKind,
        entity_id: Any,
        model: Type[M],
        loader: Callable[[], Awaitable[M]],
    ) -> M:
        """Return the cached snapshot or load, cache and return it.

        ``loader`` raises NotFoundError for an absent entity; nothing is
        cached in that case.
        """
        if kind not in CACHED_KINDS:
            raise ValueError(f"{kind.value} snapshots are not cached")
        key = cache_key(kind, entity_id)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return model.model_validate_json(cached)

        logger.debug(f"Cache miss for {key}")
        snapshot = await loader()
        await self._cache.set(key, snapshot.model_dump_json())
        return snapshot

    # Writes

    @asynccontextmanager
    async def mutation(self) -> AsyncIterator[MutationScope]:
        """Write transaction whose invalidation plan is flushed after commit."""
        async with self._store.transaction() as session:
            scope = MutationScope(session=session)
            yield scope
        await self.invalidate(scope.plan)

    async def invalidate(self, plan: InvalidationPlan) -> int:
        """Delete every planned key; absent keys are ignored."""
        if not plan:
            return 0
        removed = await self._cache.delete_many(plan.keys)
        logger.debug(f"Invalidated {len(plan)} cache keys ({removed} present): {plan.keys}")
        return removed

    async def invalidate_key(self, kind: EntityKind, entity_id: Any) -> bool:
        return await self._cache.delete(cache_key(kind, entity_id))

    # Closures

    async def collect_identity(
        self,
        session: StoreSession,
        plan: InvalidationPlan,
        identity_id: Any,
        include_parkings: bool = False,
    ) -> None:
        """Identity key plus every owned car (and their parkings when the cars go away)."""
        plan.add(EntityKind.IDENTITY, _raw(identity_id))
        cars = await session.fetch_many(CAR, {"identity_id": _raw(identity_id)})
        for car in cars:
            plan.add(EntityKind.CAR, car["id"])
            if include_parkings:
                await self._collect_linked(session, plan, "car_id", car["id"], EntityKind.PARKING)

    async def collect_car(
        self,
        session: StoreSession,
        plan: InvalidationPlan,
        car_id: Any,
        owner_ids: Iterable[Any] = (),
    ) -> None:
        """Car key, its owner(s) and every parking it is associated with."""
        plan.add(EntityKind.CAR, _raw(car_id))
        plan.add(EntityKind.IDENTITY, *(_raw(owner_id) for owner_id in owner_ids))
        await self._collect_linked(session, plan, "car_id", _raw(car_id), EntityKind.PARKING)

    async def collect_parking(self, session: StoreSession, plan: InvalidationPlan, parking_id: Any) -> None:
        """Parking key and every associated car."""
        plan.add(EntityKind.PARKING, _raw(parking_id))
        await self._collect_linked(session, plan, "parking_id", _raw(parking_id), EntityKind.CAR)

    async def collect_address(self, session: StoreSession, plan: InvalidationPlan, address_id: Any) -> None:
        """The parking placed at the address, with that parking's cars."""
        for parking in await session.fetch_many(PARKING, {"address_id": _raw(address_id)}):
            await self.collect_parking(session, plan, parking["id"])

    def collect_association(self, plan: InvalidationPlan, parking_id: Any, car_id: Any) -> None:
        plan.add(EntityKind.PARKING, _raw(parking_id))
        plan.add(EntityKind.CAR, _raw(car_id))

    async def _collect_linked(
        self,
        session: StoreSession,
        plan: InvalidationPlan,
        column: str,
        value: Any,
        kind: EntityKind,
    ) -> None:
        other = "parking_id" if column == "car_id" else "car_id"
        for link in await session.fetch_many(PARKING_CAR, {column: value}):
            plan.add(kind, link[other])
