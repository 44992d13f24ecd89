"""Tests for the identity service."""

from uuid import uuid4

import pytest

from parkhub.core.value_objects import IdentityId
from parkhub.core.exceptions import (
    DuplicateResourceError,
    NotFoundError,
    PasswordUnchangedError,
    RequiredFieldError,
    StatusUnchangedError,
)
from parkhub.features.identities.entities.identity import Identity, Role
from parkhub.features.identities.models.requests import (
    ChangePasswordRequest,
    ChangeStatusRequest,
    IdentityCreateRequest,
    IdentityUpdateRequest,
)
from parkhub.features.identities.repositories.identity_repository import IdentityRepository


def create_request(**overrides):
    values = dict(
        username="dmitry",
        password="s3cret",
        email="dmitry@example.com",
        firstname="Dmitry",
        lastname="Ivanov",
        patronymic="Olegovich",
    )
    values.update(overrides)
    return IdentityCreateRequest(**values)


async def stored(container, identity_id):
    async with container.store.transaction(read_only=True) as session:
        return await IdentityRepository(session).find_by_id(IdentityId(identity_id))


class TestIdentityEntity:

    def test_create_requires_fields(self):
        with pytest.raises(RequiredFieldError) as exc_info:
            Identity.create(
                authority=Role.USER, username="x", password_hash="h", email=" ",
                firstname="a", lastname="b", patronymic="c",
            )
        assert exc_info.value.field_name == "email"

    def test_create_defaults_enabled(self):
        identity = Identity.create(
            authority="ADMIN", username="x", password_hash="h", email="x@e",
            firstname="a", lastname="b", patronymic="c",
        )
        assert identity.enabled
        assert identity.is_admin

    def test_with_changes_keeps_unsupplied(self):
        identity = Identity.create(
            authority=Role.USER, username="x", password_hash="h", email="x@e",
            firstname="a", lastname="b", patronymic="c",
        )
        changed = identity.with_changes({"lastname": "z", "email": None})
        assert changed.lastname == "z"
        assert changed.email == "x@e"


class TestIdentityService:

    @pytest.mark.asyncio
    async def test_create(self, container):
        response = await container.identities.create(create_request())
        assert response.authority is Role.USER
        assert response.enabled
        assert response.cars == []
        assert "password" not in response.model_dump()

        identity = await stored(container, response.id)
        assert identity.password != "s3cret"
        assert container.hasher.verify("s3cret", identity.password)

    @pytest.mark.asyncio
    async def test_create_missing_password(self, container):
        with pytest.raises(RequiredFieldError):
            await container.identities.create(create_request(password=None))

    @pytest.mark.asyncio
    async def test_create_duplicate_email(self, container):
        await container.identities.create(create_request())
        with pytest.raises(DuplicateResourceError):
            await container.identities.create(create_request(username="other"))

    @pytest.mark.asyncio
    async def test_find_all_returns_short_projections(self, container, user, other_user):
        identities = await container.identities.find_all()
        assert {identity.username for identity in identities} == {"alice", "bob"}
        assert not hasattr(identities[0], "cars")

    @pytest.mark.asyncio
    async def test_find_by_id_includes_cars(self, container, user, add_car):
        owner, _ = user
        car = await add_car(owner.id)
        response = await container.identities.find_by_id(owner.id)
        assert [c.id for c in response.cars] == [car.id]

    @pytest.mark.asyncio
    async def test_find_missing(self, container):
        with pytest.raises(NotFoundError):
            await container.identities.find_by_id(uuid4())

    @pytest.mark.asyncio
    async def test_partial_update(self, container, user):
        owner, _ = user
        response = await container.identities.update(IdentityUpdateRequest(id=owner.id, lastname="Sidorov"))
        assert response.lastname == "Sidorov"
        assert response.firstname == owner.firstname
        assert response.username == owner.username

    @pytest.mark.asyncio
    async def test_update_to_blank_rejected(self, container, user):
        owner, _ = user
        with pytest.raises(RequiredFieldError):
            await container.identities.update(IdentityUpdateRequest(id=owner.id, username="  "))

    @pytest.mark.asyncio
    async def test_update_missing_id(self, container):
        with pytest.raises(RequiredFieldError):
            await container.identities.update(IdentityUpdateRequest(lastname="x"))

    @pytest.mark.asyncio
    async def test_delete(self, container, user):
        owner, _ = user
        await container.identities.delete(owner.id)
        assert await stored(container, owner.id) is None
        with pytest.raises(NotFoundError):
            await container.identities.delete(owner.id)

    @pytest.mark.asyncio
    async def test_change_password(self, container, user):
        owner, _ = user
        await container.identities.change_password(ChangePasswordRequest(id=owner.id, password="new-pass"))
        identity = await stored(container, owner.id)
        assert container.hasher.verify("new-pass", identity.password)

    @pytest.mark.asyncio
    async def test_change_password_to_same(self, container, user):
        owner, credentials = user
        with pytest.raises(PasswordUnchangedError):
            await container.identities.change_password(
                ChangePasswordRequest(id=owner.id, password=credentials.password)
            )

    @pytest.mark.asyncio
    async def test_change_status(self, container, user):
        owner, _ = user
        await container.identities.change_status(ChangeStatusRequest(id=owner.id, enabled=False))
        assert not (await container.identities.find_by_id(owner.id)).enabled
        with pytest.raises(StatusUnchangedError):
            await container.identities.change_status(ChangeStatusRequest(id=owner.id, enabled=False))

    @pytest.mark.asyncio
    async def test_change_status_requires_value(self, container, user):
        owner, _ = user
        with pytest.raises(RequiredFieldError):
            await container.identities.change_status(ChangeStatusRequest(id=owner.id))
