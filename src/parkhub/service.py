"""Service facade.

Every operation goes through ``execute``: the authorization interceptor
authenticates the caller, parses the payload and applies the operation's
policy, then the feature service runs. The outcome is always returned as an
``OperationResult``; taxonomy errors never escape the facade.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from .core.exceptions import AdminRequiredError, ErrorKind, ParkhubError
from .core.shared import OperationResult
from .features.addresses.services.address_service import AddressService
from .features.auth.entities.caller import AuthenticatedCaller, Credentials
from .features.auth.entities.policies import Operation, get_operation_spec
from .features.auth.services.authorization_interceptor import AuthorizationInterceptor
from .features.cars.services.car_service import CarService
from .features.identities.entities.identity import Role
from .features.identities.models.requests import IdentityCreateRequest
from .features.identities.services.identity_service import IdentityService
from .features.parking.services.parking_service import ParkingService

logger = logging.getLogger(__name__)

Handler = Callable[[Optional[AuthenticatedCaller], Any], Awaitable[Any]]

# Failures of the infrastructure rather than of the request
_INFRASTRUCTURE_KINDS = (ErrorKind.STORE, ErrorKind.CACHE)


def _with_payload(method: Callable[[Any], Awaitable[Any]]) -> Handler:
    async def handle(caller: Optional[AuthenticatedCaller], payload: Any) -> Any:
        return await method(payload)
    return handle


def _without_payload(method: Callable[[], Awaitable[Any]]) -> Handler:
    async def handle(caller: Optional[AuthenticatedCaller], payload: Any) -> Any:
        return await method()
    return handle


class ParkhubService:
    """Single entry point for all entity operations."""

    def __init__(
        self,
        interceptor: AuthorizationInterceptor,
        identities: IdentityService,
        cars: CarService,
        addresses: AddressService,
        parking: ParkingService,
    ):
        self._interceptor = interceptor
        self._identities = identities
        self._handlers: Dict[Operation, Handler] = {
            Operation.IDENTITY_CREATE: self._create_identity,
            Operation.IDENTITY_FIND_ALL: _without_payload(identities.find_all),
            Operation.IDENTITY_FIND_BY_ID: _with_payload(identities.find_by_id),
            Operation.IDENTITY_UPDATE: _with_payload(identities.update),
            Operation.IDENTITY_DELETE: _with_payload(identities.delete),
            Operation.IDENTITY_CHANGE_PASSWORD: _with_payload(identities.change_password),
            Operation.IDENTITY_CHANGE_STATUS: _with_payload(identities.change_status),

            Operation.CAR_CREATE: _with_payload(cars.create),
            Operation.CAR_FIND_ALL: _without_payload(cars.find_all),
            Operation.CAR_FIND_BY_IDENTITY: _with_payload(cars.find_by_identity),
            Operation.CAR_FIND_BY_ID: _with_payload(cars.find_by_id),
            Operation.CAR_UPDATE: _with_payload(cars.update),
            Operation.CAR_DELETE: _with_payload(cars.delete),

            Operation.ADDRESS_CREATE: _with_payload(addresses.create),
            Operation.ADDRESS_FIND_ALL: _without_payload(addresses.find_all),
            Operation.ADDRESS_FIND_BY_ID: _with_payload(addresses.find_by_id),
            Operation.ADDRESS_UPDATE: _with_payload(addresses.update),
            Operation.ADDRESS_DELETE: _with_payload(addresses.delete),

            Operation.PARKING_CREATE: _with_payload(parking.create),
            Operation.PARKING_FIND_ALL: _without_payload(parking.find_all),
            Operation.PARKING_FIND_BY_ID: _with_payload(parking.find_by_id),
            Operation.PARKING_UPDATE: _with_payload(parking.update),
            Operation.PARKING_DELETE: _with_payload(parking.delete),
            Operation.PARKING_ADD_CARS: _with_payload(parking.add_cars),
            Operation.PARKING_REMOVE_CARS: _with_payload(parking.remove_cars),
        }

    async def execute(
        self,
        operation: Operation,
        credentials: Optional[Credentials] = None,
        payload: Any = None,
    ) -> OperationResult:
        """Authorize and run one operation."""
        spec = get_operation_spec(operation)
        decision = await self._interceptor.authorize(spec, credentials, payload)
        if not decision.allowed:
            return OperationResult.failure(decision.error)

        try:
            value = await self._handlers[spec.operation](decision.caller, decision.payload)
        except ParkhubError as e:
            if e.kind in _INFRASTRUCTURE_KINDS:
                logger.error(f"{spec.operation.value} failed: {e.error_code}: {e.message}")
            else:
                logger.info(f"{spec.operation.value} rejected: {e.error_code}: {e.message}")
            return OperationResult.failure(e)

        logger.debug(f"{spec.operation.value} completed")
        return OperationResult.success(value)

    async def _create_identity(
        self,
        caller: Optional[AuthenticatedCaller],
        request: IdentityCreateRequest,
    ) -> Any:
        # Self-registration is public; only an admin may grant the ADMIN role
        if request.authority is Role.ADMIN and (caller is None or not caller.is_admin):
            raise AdminRequiredError("Creating an ADMIN identity requires the ADMIN role")
        return await self._identities.create(request)

    # Identities

    async def create_identity(self, payload: Any, credentials: Optional[Credentials] = None) -> OperationResult:
        return await self.execute(Operation.IDENTITY_CREATE, credentials, payload)

    async def find_identities(self, credentials: Credentials) -> OperationResult:
        return await self.execute(Operation.IDENTITY_FIND_ALL, credentials)

    async def find_identity(self, credentials: Credentials, identity_id: Any) -> OperationResult:
        return await self.execute(Operation.IDENTITY_FIND_BY_ID, credentials, identity_id)

    async def update_identity(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.IDENTITY_UPDATE, credentials, payload)

    async def delete_identity(self, credentials: Credentials, identity_id: Any) -> OperationResult:
        return await self.execute(Operation.IDENTITY_DELETE, credentials, identity_id)

    async def change_password(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.IDENTITY_CHANGE_PASSWORD, credentials, payload)

    async def change_status(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.IDENTITY_CHANGE_STATUS, credentials, payload)

    # Cars

    async def create_car(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.CAR_CREATE, credentials, payload)

    async def find_cars(self, credentials: Credentials) -> OperationResult:
        return await self.execute(Operation.CAR_FIND_ALL, credentials)

    async def find_cars_by_identity(self, credentials: Credentials, identity_id: Any) -> OperationResult:
        return await self.execute(Operation.CAR_FIND_BY_IDENTITY, credentials, identity_id)

    async def find_car(self, credentials: Credentials, car_id: Any) -> OperationResult:
        return await self.execute(Operation.CAR_FIND_BY_ID, credentials, car_id)

    async def update_car(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.CAR_UPDATE, credentials, payload)

    async def delete_car(self, credentials: Credentials, car_id: Any) -> OperationResult:
        return await self.execute(Operation.CAR_DELETE, credentials, car_id)

    # Addresses

    async def create_address(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.ADDRESS_CREATE, credentials, payload)

    async def find_addresses(self, credentials: Credentials) -> OperationResult:
        return await self.execute(Operation.ADDRESS_FIND_ALL, credentials)

    async def find_address(self, credentials: Credentials, address_id: Any) -> OperationResult:
        return await self.execute(Operation.ADDRESS_FIND_BY_ID, credentials, address_id)

    async def update_address(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.ADDRESS_UPDATE, credentials, payload)

    async def delete_address(self, credentials: Credentials, address_id: Any) -> OperationResult:
        return await self.execute(Operation.ADDRESS_DELETE, credentials, address_id)

    # Parking

    async def create_parking(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_CREATE, credentials, payload)

    async def find_parkings(self, credentials: Credentials) -> OperationResult:
        return await self.execute(Operation.PARKING_FIND_ALL, credentials)

    async def find_parking(self, credentials: Credentials, parking_id: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_FIND_BY_ID, credentials, parking_id)

    async def update_parking(self, credentials: Credentials, payload: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_UPDATE, credentials, payload)

    async def delete_parking(self, credentials: Credentials, parking_id: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_DELETE, credentials, parking_id)

    async def add_cars(self, credentials: Credentials, pairs: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_ADD_CARS, credentials, pairs)

    async def remove_cars(self, credentials: Credentials, pairs: Any) -> OperationResult:
        return await self.execute(Operation.PARKING_REMOVE_CARS, credentials, pairs)
