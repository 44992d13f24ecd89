"""Operation catalogue: every facade operation with its access policy.

Each operation declares the resource it acts on, its policy and, for
ownership-checked operations, how to find the targeted identity or car in
the parsed payload.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel

from ....core.exceptions import ValidationError
from ....core.shared import parse_payload
from ....core.value_objects import AddressId, CarId, IdentityId, ParkingId, coerce_id
from ...addresses.models.requests import AddressCreateRequest, AddressUpdateRequest
from ...cars.models.requests import CarCreateRequest, CarUpdateRequest
from ...coherence.entities.keys import EntityKind
from ...identities.models.requests import (
    ChangePasswordRequest,
    ChangeStatusRequest,
    IdentityCreateRequest,
    IdentityUpdateRequest,
)
from ...parking.models.requests import ParkingCarRequest, ParkingCreateRequest, ParkingUpdateRequest


class AccessPolicy(str, Enum):
    PUBLIC = "public"
    SELF_OR_OWNER = "self_or_owner"
    ADMIN_ONLY = "admin_only"


class OwnershipTarget(str, Enum):
    """What the ownership check compares the caller against."""
    NONE = "none"          # any enabled caller
    IDENTITY = "identity"  # caller must be this identity
    CAR = "car"            # caller must own this car


class Operation(str, Enum):
    IDENTITY_CREATE = "identity.create"
    IDENTITY_FIND_ALL = "identity.find_all"
    IDENTITY_FIND_BY_ID = "identity.find_by_id"
    IDENTITY_UPDATE = "identity.update"
    IDENTITY_DELETE = "identity.delete"
    IDENTITY_CHANGE_PASSWORD = "identity.change_password"
    IDENTITY_CHANGE_STATUS = "identity.change_status"

    CAR_CREATE = "car.create"
    CAR_FIND_ALL = "car.find_all"
    CAR_FIND_BY_IDENTITY = "car.find_by_identity"
    CAR_FIND_BY_ID = "car.find_by_id"
    CAR_UPDATE = "car.update"
    CAR_DELETE = "car.delete"

    ADDRESS_CREATE = "address.create"
    ADDRESS_FIND_ALL = "address.find_all"
    ADDRESS_FIND_BY_ID = "address.find_by_id"
    ADDRESS_UPDATE = "address.update"
    ADDRESS_DELETE = "address.delete"

    PARKING_CREATE = "parking.create"
    PARKING_FIND_ALL = "parking.find_all"
    PARKING_FIND_BY_ID = "parking.find_by_id"
    PARKING_UPDATE = "parking.update"
    PARKING_DELETE = "parking.delete"
    PARKING_ADD_CARS = "parking.add_cars"
    PARKING_REMOVE_CARS = "parking.remove_cars"


# Payload parsers

def _no_payload(payload: Any) -> None:
    return None


def _model(model: type) -> Callable[[Any], BaseModel]:
    return lambda payload: parse_payload(model, payload)


def _identifier(id_type: type, field_name: str) -> Callable[[Any], Any]:
    return lambda payload: coerce_id(id_type, payload, field_name)


def _batch(model: type) -> Callable[[Any], List[BaseModel]]:
    def parse(payload: Any) -> List[BaseModel]:
        if payload is None or isinstance(payload, (str, bytes, dict)) or not isinstance(payload, Sequence):
            raise ValidationError(f"A list of {model.__name__} is required")
        return [parse_payload(model, item) for item in payload]
    return parse


# Target extractors

def _itself(payload: Any) -> Any:
    return payload


def _field(name: str) -> Callable[[Any], Any]:
    return lambda payload: getattr(payload, name)


@dataclass(frozen=True)
class OperationSpec:
    """Declared policy of one operation."""

    operation: Operation
    resource: EntityKind
    policy: AccessPolicy
    parse: Callable[[Any], Any] = _no_payload
    ownership: OwnershipTarget = OwnershipTarget.NONE
    target: Optional[Callable[[Any], Any]] = None
    # Target names a related entity in a create payload rather than the resource itself
    target_is_reference: bool = False

    def __post_init__(self):
        if self.policy is AccessPolicy.SELF_OR_OWNER and self.ownership is not OwnershipTarget.NONE:
            if self.target is None:
                raise ValueError(f"{self.operation.value} needs a target extractor")


_IDENTITY = EntityKind.IDENTITY
_CAR = EntityKind.CAR
_ADDRESS = EntityKind.ADDRESS
_PARKING = EntityKind.PARKING
_PUBLIC = AccessPolicy.PUBLIC
_OWNER = AccessPolicy.SELF_OR_OWNER
_ADMIN = AccessPolicy.ADMIN_ONLY

OPERATIONS: Dict[Operation, OperationSpec] = {spec.operation: spec for spec in (
    # Identities
    OperationSpec(Operation.IDENTITY_CREATE, _IDENTITY, _PUBLIC, _model(IdentityCreateRequest)),
    OperationSpec(Operation.IDENTITY_FIND_ALL, _IDENTITY, _ADMIN),
    OperationSpec(Operation.IDENTITY_FIND_BY_ID, _IDENTITY, _OWNER, _identifier(IdentityId, "identity_id"),
                  OwnershipTarget.IDENTITY, _itself),
    OperationSpec(Operation.IDENTITY_UPDATE, _IDENTITY, _OWNER, _model(IdentityUpdateRequest),
                  OwnershipTarget.IDENTITY, _field("id")),
    OperationSpec(Operation.IDENTITY_DELETE, _IDENTITY, _OWNER, _identifier(IdentityId, "identity_id"),
                  OwnershipTarget.IDENTITY, _itself),
    OperationSpec(Operation.IDENTITY_CHANGE_PASSWORD, _IDENTITY, _OWNER, _model(ChangePasswordRequest),
                  OwnershipTarget.IDENTITY, _field("id")),
    OperationSpec(Operation.IDENTITY_CHANGE_STATUS, _IDENTITY, _ADMIN, _model(ChangeStatusRequest)),

    # Cars
    OperationSpec(Operation.CAR_CREATE, _CAR, _OWNER, _model(CarCreateRequest),
                  OwnershipTarget.IDENTITY, _field("identity_id"), target_is_reference=True),
    OperationSpec(Operation.CAR_FIND_ALL, _CAR, _ADMIN),
    OperationSpec(Operation.CAR_FIND_BY_IDENTITY, _CAR, _OWNER, _identifier(IdentityId, "identity_id"),
                  OwnershipTarget.IDENTITY, _itself),
    OperationSpec(Operation.CAR_FIND_BY_ID, _CAR, _OWNER, _identifier(CarId, "car_id"),
                  OwnershipTarget.CAR, _itself),
    OperationSpec(Operation.CAR_UPDATE, _CAR, _OWNER, _model(CarUpdateRequest),
                  OwnershipTarget.CAR, _field("id")),
    OperationSpec(Operation.CAR_DELETE, _CAR, _OWNER, _identifier(CarId, "car_id"),
                  OwnershipTarget.CAR, _itself),

    # Addresses
    OperationSpec(Operation.ADDRESS_CREATE, _ADDRESS, _ADMIN, _model(AddressCreateRequest)),
    OperationSpec(Operation.ADDRESS_FIND_ALL, _ADDRESS, _OWNER),
    OperationSpec(Operation.ADDRESS_FIND_BY_ID, _ADDRESS, _OWNER, _identifier(AddressId, "address_id")),
    OperationSpec(Operation.ADDRESS_UPDATE, _ADDRESS, _ADMIN, _model(AddressUpdateRequest)),
    OperationSpec(Operation.ADDRESS_DELETE, _ADDRESS, _ADMIN, _identifier(AddressId, "address_id")),

    # Parking
    OperationSpec(Operation.PARKING_CREATE, _PARKING, _ADMIN, _model(ParkingCreateRequest)),
    OperationSpec(Operation.PARKING_FIND_ALL, _PARKING, _OWNER),
    OperationSpec(Operation.PARKING_FIND_BY_ID, _PARKING, _OWNER, _identifier(ParkingId, "parking_id")),
    OperationSpec(Operation.PARKING_UPDATE, _PARKING, _ADMIN, _model(ParkingUpdateRequest)),
    OperationSpec(Operation.PARKING_DELETE, _PARKING, _ADMIN, _identifier(ParkingId, "parking_id")),
    OperationSpec(Operation.PARKING_ADD_CARS, _PARKING, _ADMIN, _batch(ParkingCarRequest)),
    OperationSpec(Operation.PARKING_REMOVE_CARS, _PARKING, _ADMIN, _batch(ParkingCarRequest)),
)}


def get_operation_spec(operation: Operation) -> OperationSpec:
    return OPERATIONS[Operation(operation)]
