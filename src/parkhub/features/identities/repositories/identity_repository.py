"""Identity repository bound to one store session."""

import logging
from typing import List, Optional

from ....core.exceptions import NotFoundError
from ....core.value_objects import IdentityId
from ...cars.entities.car import Car
from ...database.entities.protocols import StoreSession
from ...database.entities.schema import CAR, IDENTITY
from ..entities.identity import Identity
from ..models.responses import IdentityResponse

logger = logging.getLogger(__name__)


class IdentityRepository:
    """CRUD and eager loaders for identities."""

    def __init__(self, session: StoreSession):
        self._session = session

    async def create(self, identity: Identity) -> Identity:
        row = await self._session.insert(IDENTITY, identity.to_row())
        return Identity.from_row(row)

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        row = await self._session.fetch_one(IDENTITY, identity_id.value)
        return Identity.from_row(row) if row else None

    async def get(self, identity_id: IdentityId) -> Identity:
        """Find by id or raise NotFoundError."""
        identity = await self.find_by_id(identity_id)
        if identity is None:
            raise NotFoundError("Identity", identity_id)
        return identity

    async def lock(self, identity_id: IdentityId) -> Optional[Identity]:
        """Load the identity holding its row lock until the transaction ends."""
        row = await self._session.lock_one(IDENTITY, identity_id.value)
        return Identity.from_row(row) if row else None

    async def get_for_update(self, identity_id: IdentityId) -> Identity:
        identity = await self.lock(identity_id)
        if identity is None:
            raise NotFoundError("Identity", identity_id)
        return identity

    async def lock_cars(self, identity_id: IdentityId) -> List[Car]:
        """Lock every car owned by the identity, in id order."""
        rows = await self._session.fetch_many(CAR, {"identity_id": identity_id.value})
        locked = []
        for car_id in sorted(row["id"] for row in rows):
            row = await self._session.lock_one(CAR, car_id)
            if row is not None:
                locked.append(Car.from_row(row))
        return locked

    async def find_by_email(self, email: str) -> Optional[Identity]:
        rows = await self._session.fetch_many(IDENTITY, {"email": email})
        return Identity.from_row(rows[0]) if rows else None

    async def find_all(self) -> List[Identity]:
        return [Identity.from_row(row) for row in await self._session.fetch_many(IDENTITY)]

    async def save(self, identity: Identity) -> Identity:
        """Write every column of an existing identity."""
        values = identity.to_row()
        values.pop("id")
        row = await self._session.update(IDENTITY, identity.id.value, values)
        if row is None:
            raise NotFoundError("Identity", identity.id)
        return Identity.from_row(row)

    async def delete(self, identity_id: IdentityId) -> bool:
        """Delete the identity; its cars and their parking links cascade."""
        return await self._session.delete(IDENTITY, identity_id.value)

    async def find_identity_with_cars(self, identity_id: IdentityId) -> Optional[IdentityResponse]:
        """Full projection: the identity and short projections of its cars."""
        identity = await self.find_by_id(identity_id)
        if identity is None:
            return None
        cars = await self._session.fetch_many(CAR, {"identity_id": identity_id.value})
        return IdentityResponse.from_entities(identity, [Car.from_row(row).to_short() for row in cars])
