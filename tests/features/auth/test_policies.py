"""Tests for the operation catalogue."""

from uuid import uuid4

import pytest

from parkhub.core.exceptions import RequiredFieldError, ValidationError
from parkhub.core.value_objects import CarId
from parkhub.features.auth.entities.policies import (
    OPERATIONS,
    AccessPolicy,
    Operation,
    OperationSpec,
    OwnershipTarget,
    get_operation_spec,
)
from parkhub.features.coherence.entities.keys import EntityKind
from parkhub.features.parking.models.requests import ParkingCarRequest


class TestOperationCatalogue:

    def test_every_operation_declared(self):
        assert set(OPERATIONS) == set(Operation)

    @pytest.mark.parametrize("operation", [
        Operation.IDENTITY_FIND_ALL,
        Operation.IDENTITY_CHANGE_STATUS,
        Operation.CAR_FIND_ALL,
        Operation.ADDRESS_CREATE,
        Operation.ADDRESS_UPDATE,
        Operation.ADDRESS_DELETE,
        Operation.PARKING_CREATE,
        Operation.PARKING_UPDATE,
        Operation.PARKING_DELETE,
        Operation.PARKING_ADD_CARS,
        Operation.PARKING_REMOVE_CARS,
    ])
    def test_admin_only(self, operation):
        assert get_operation_spec(operation).policy is AccessPolicy.ADMIN_ONLY

    def test_identity_create_is_public(self):
        assert get_operation_spec(Operation.IDENTITY_CREATE).policy is AccessPolicy.PUBLIC

    def test_lookup_by_value(self):
        assert get_operation_spec("car.find_by_id").ownership is OwnershipTarget.CAR

    def test_ownership_requires_target(self):
        with pytest.raises(ValueError):
            OperationSpec(Operation.CAR_DELETE, EntityKind.CAR, AccessPolicy.SELF_OR_OWNER,
                          ownership=OwnershipTarget.CAR)


class TestPayloadParsing:

    def test_identifier(self):
        raw = uuid4()
        assert get_operation_spec(Operation.CAR_FIND_BY_ID).parse(str(raw)) == CarId(raw)

    def test_identifier_missing(self):
        with pytest.raises(RequiredFieldError):
            get_operation_spec(Operation.CAR_DELETE).parse(None)

    def test_model(self):
        spec = get_operation_spec(Operation.CAR_UPDATE)
        raw = uuid4()
        request = spec.parse({"id": str(raw), "brand": "VAZ"})
        assert spec.target(request) == raw

    def test_model_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            get_operation_spec(Operation.IDENTITY_UPDATE).parse({"id": str(uuid4()), "authority": "ADMIN"})

    def test_batch(self):
        pairs = [{"parking_id": str(uuid4()), "car_id": str(uuid4())}]
        parsed = get_operation_spec(Operation.PARKING_ADD_CARS).parse(pairs)
        assert isinstance(parsed[0], ParkingCarRequest)

    @pytest.mark.parametrize("payload", [None, {"parking_id": "x"}, "pairs"])
    def test_batch_requires_list(self, payload):
        with pytest.raises(ValidationError):
            get_operation_spec(Operation.PARKING_REMOVE_CARS).parse(payload)
