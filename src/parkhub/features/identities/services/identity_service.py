"""Identity service: account CRUD, password and status changes."""

import logging
from typing import List, Optional

from ....core.exceptions import (
    NotFoundError,
    PasswordUnchangedError,
    StatusUnchangedError,
)
from ....core.projections import IdentityShort
from ....core.shared import require
from ....core.value_objects import IdentityId, coerce_id
from ...auth.utils.passwords import PasswordHasher
from ...coherence.entities.keys import EntityKind
from ...coherence.services.coordinator import CacheCoordinator
from ...events.services.event_dispatcher import EventDispatcher
from ..entities.identity import Identity
from ..models.requests import (
    ChangePasswordRequest,
    ChangeStatusRequest,
    IdentityCreateRequest,
    IdentityUpdateRequest,
)
from ..models.responses import IdentityResponse
from ..repositories.identity_repository import IdentityRepository

logger = logging.getLogger(__name__)


class IdentityService:
    """Identity operations with cache-aside reads and post-commit invalidation.

    Every change to an identity invalidates its own snapshot and the
    snapshots of its cars, which embed the owner's short projection.
    Mutations lock the identity row before collecting keys; a car can only
    be created for, or moved to, an identity after locking it.
    """

    def __init__(
        self,
        coordinator: CacheCoordinator,
        hasher: PasswordHasher,
        events: Optional[EventDispatcher] = None,
    ):
        self._coordinator = coordinator
        self._hasher = hasher
        self._events = events

    async def create(self, request: IdentityCreateRequest) -> IdentityResponse:
        password = require("Identity", "password", request.password)
        identity = Identity.create(
            authority=request.authority,
            username=request.username,
            password_hash=await self._hasher.hash_async(password),
            email=request.email,
            firstname=request.firstname,
            lastname=request.lastname,
            patronymic=request.patronymic,
            enabled=request.enabled,
        )
        async with self._coordinator.mutation() as scope:
            identity = await IdentityRepository(scope.session).create(identity)
        response = IdentityResponse.from_entities(identity, [])

        logger.info(f"Created identity {identity.id} ({identity.username})")
        if self._events:
            self._events.emit_created(EntityKind.IDENTITY, identity.id, response)
        return response

    async def find_all(self) -> List[IdentityShort]:
        async with self._coordinator.store.transaction(read_only=True) as session:
            identities = await IdentityRepository(session).find_all()
        return [identity.to_short() for identity in identities]

    async def find_by_id(self, identity_id) -> IdentityResponse:
        identity_id = coerce_id(IdentityId, identity_id, "identity_id")

        async def load() -> IdentityResponse:
            async with self._coordinator.store.transaction(read_only=True) as session:
                response = await IdentityRepository(session).find_identity_with_cars(identity_id)
            if response is None:
                raise NotFoundError("Identity", identity_id)
            return response

        return await self._coordinator.get_or_load(EntityKind.IDENTITY, identity_id, IdentityResponse, load)

    async def update(self, request: IdentityUpdateRequest) -> IdentityResponse:
        identity_id = coerce_id(IdentityId, request.id, "id")
        changes = request.model_dump(exclude={"id"}, exclude_none=True)
        async with self._coordinator.mutation() as scope:
            repository = IdentityRepository(scope.session)
            identity = await repository.get_for_update(identity_id)
            await repository.save(identity.with_changes(changes))
            await self._coordinator.collect_identity(scope.session, scope.plan, identity_id)
            response = await repository.find_identity_with_cars(identity_id)

        logger.info(f"Updated identity {identity_id}: {sorted(changes)}")
        return response

    async def delete(self, identity_id) -> None:
        identity_id = coerce_id(IdentityId, identity_id, "identity_id")
        async with self._coordinator.mutation() as scope:
            repository = IdentityRepository(scope.session)
            await repository.get_for_update(identity_id)
            await repository.lock_cars(identity_id)
            # Owned cars are deleted too, so their parkings change as well
            await self._coordinator.collect_identity(
                scope.session, scope.plan, identity_id, include_parkings=True
            )
            await repository.delete(identity_id)

        logger.info(f"Deleted identity {identity_id}")

    async def change_password(self, request: ChangePasswordRequest) -> None:
        identity_id = coerce_id(IdentityId, request.id, "id")
        password = require("Identity", "password", request.password)
        async with self._coordinator.mutation() as scope:
            repository = IdentityRepository(scope.session)
            identity = await repository.get_for_update(identity_id)
            if await self._hasher.verify_async(password, identity.password):
                raise PasswordUnchangedError("New password matches the current password")
            identity.password = await self._hasher.hash_async(password)
            await repository.save(identity)
            await self._coordinator.collect_identity(scope.session, scope.plan, identity_id)

        logger.info(f"Changed password for identity {identity_id}")

    async def change_status(self, request: ChangeStatusRequest) -> None:
        identity_id = coerce_id(IdentityId, request.id, "id")
        enabled = require("Identity", "enabled", request.enabled)
        async with self._coordinator.mutation() as scope:
            repository = IdentityRepository(scope.session)
            identity = await repository.get_for_update(identity_id)
            if identity.enabled == enabled:
                raise StatusUnchangedError(
                    f"Identity {identity_id} is already {'enabled' if enabled else 'disabled'}"
                )
            identity.enabled = enabled
            await repository.save(identity)
            await self._coordinator.collect_identity(scope.session, scope.plan, identity_id)

        logger.info(f"Identity {identity_id} {'enabled' if enabled else 'disabled'}")
