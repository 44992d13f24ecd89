"""Tests for the address service."""

from uuid import uuid4

import pytest

from parkhub.core.exceptions import NotFoundError, RequiredFieldError
from parkhub.features.addresses.models.requests import AddressCreateRequest, AddressUpdateRequest


class TestAddressService:

    @pytest.mark.asyncio
    async def test_create_and_find(self, container):
        created = await container.addresses.create(
            AddressCreateRequest(city="Moscow", street="Arbat", house="10")
        )
        assert created.parking is None
        found = await container.addresses.find_by_id(created.id)
        assert found == created
        assert [a.id for a in await container.addresses.find_all()] == [created.id]

    @pytest.mark.asyncio
    async def test_create_requires_fields(self, container):
        with pytest.raises(RequiredFieldError):
            await container.addresses.create(AddressCreateRequest(city="Moscow", street="Arbat"))

    @pytest.mark.asyncio
    async def test_find_includes_parking(self, container, add_parking):
        parking = await add_parking(price=250)
        address = await container.addresses.find_by_id(parking.address.id)
        assert address.parking.id == parking.id
        assert address.parking.price == 250

    @pytest.mark.asyncio
    async def test_update(self, container, add_parking):
        parking = await add_parking()
        updated = await container.addresses.update(AddressUpdateRequest(id=parking.address.id, house="7a"))
        assert updated.house == "7a"
        assert updated.city == parking.address.city
        assert updated.parking.id == parking.id

    @pytest.mark.asyncio
    async def test_delete_and_missing(self, container):
        created = await container.addresses.create(AddressCreateRequest(city="c", street="s", house="h"))
        await container.addresses.delete(created.id)
        with pytest.raises(NotFoundError):
            await container.addresses.find_by_id(created.id)
        with pytest.raises(NotFoundError):
            await container.addresses.delete(uuid4())
