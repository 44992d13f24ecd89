"""Authorization interceptor.

Runs before the facade operation: authenticates the caller, parses the
payload, then applies the operation's role or ownership policy. Ownership
is resolved with a preliminary read-only transaction of its own. Every
failure is returned as a denied AccessDecision and the operation never
runs.
"""

import logging
from typing import Any, Optional

from ....core.exceptions import (
    AdminRequiredError,
    AuthenticationError,
    AuthorizationError,
    InvalidReferenceError,
    NotFoundError,
    OwnershipError,
    ParkhubError,
)
from ....core.value_objects import CarId, IdentityId, coerce_id
from ...cars.repositories.car_repository import CarRepository
from ...database.entities.protocols import RelationalStore
from ...identities.repositories.identity_repository import IdentityRepository
from ..entities.caller import AuthenticatedCaller, Credentials
from ..entities.decision import AccessDecision
from ..entities.policies import AccessPolicy, OperationSpec, OwnershipTarget
from .authenticator import CredentialAuthenticator

logger = logging.getLogger(__name__)


class AuthorizationInterceptor:
    """Decides whether an operation may proceed for the given credentials."""

    def __init__(self, store: RelationalStore, authenticator: CredentialAuthenticator):
        self._store = store
        self._authenticator = authenticator

    async def authorize(
        self,
        spec: OperationSpec,
        credentials: Optional[Credentials],
        payload: Any = None,
    ) -> AccessDecision:
        try:
            return await self._evaluate(spec, credentials, payload)
        except (AuthenticationError, AuthorizationError) as e:
            logger.warning(f"Denied {spec.operation.value}: {e.message}")
            return AccessDecision.deny(e)
        except ParkhubError as e:
            logger.info(f"Rejected {spec.operation.value} before execution: {e.message}")
            return AccessDecision.deny(e)

    async def _evaluate(
        self,
        spec: OperationSpec,
        credentials: Optional[Credentials],
        payload: Any,
    ) -> AccessDecision:
        if spec.policy is AccessPolicy.PUBLIC:
            # Credentials are optional here but must be valid when supplied
            caller = await self._authenticator.authenticate(credentials) if credentials else None
            return AccessDecision.allow(caller, spec.parse(payload))

        caller = await self._authenticator.authenticate(credentials)
        parsed = spec.parse(payload)

        if spec.policy is AccessPolicy.ADMIN_ONLY:
            if not caller.is_admin:
                raise AdminRequiredError(f"{spec.operation.value} requires the ADMIN role")
        elif spec.ownership is not OwnershipTarget.NONE:
            await self._check_ownership(spec, caller, parsed)

        return AccessDecision.allow(caller, parsed)

    async def _check_ownership(self, spec: OperationSpec, caller: AuthenticatedCaller, payload: Any) -> None:
        owner_email = await self._resolve_owner_email(spec, spec.target(payload))
        if owner_email != caller.email:
            raise OwnershipError(
                f"{caller.email} does not own the {spec.resource.value} targeted by {spec.operation.value}"
            )

    async def _resolve_owner_email(self, spec: OperationSpec, target: Any) -> str:
        async with self._store.transaction(read_only=True) as session:
            if spec.ownership is OwnershipTarget.CAR:
                car_id = coerce_id(CarId, target, "car_id")
                car = await CarRepository(session).find_by_id(car_id)
                if car is None:
                    raise NotFoundError("Car", car_id)
                identity_id = car.identity_id
            else:
                identity_id = coerce_id(IdentityId, target, "identity_id")

            identity = await IdentityRepository(session).find_by_id(identity_id)
            if identity is None:
                if spec.target_is_reference:
                    raise InvalidReferenceError("Identity", identity_id)
                raise NotFoundError("Identity", identity_id)
            return identity.email
