"""Tests for entity-created events."""

import json
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from parkhub.core.projections import AddressShort
from parkhub.features.coherence.entities.keys import EntityKind
from parkhub.features.events.adapters.logging_publisher import LoggingEventPublisher
from parkhub.features.events.adapters.redis_publisher import RedisEventPublisher
from parkhub.features.events.entities.created_event import EntityCreatedEvent
from parkhub.features.events.services.event_dispatcher import EventDispatcher
from parkhub.features.parking.models.requests import ParkingUpdateRequest


def snapshot():
    return AddressShort(id=uuid4(), city="Moscow", street="Arbat", house="1")


class TestEntityCreatedEvent:

    def test_name_and_channel(self):
        event = EntityCreatedEvent(kind=EntityKind.PARKING, entity_id="p1", payload="{}")
        assert event.name == "Create Parking"
        assert event.channel() == "parking-topic"
        assert event.channel("prod.") == "prod.parking-topic"

    def test_message(self):
        event = EntityCreatedEvent(kind=EntityKind.CAR, entity_id="c1", payload='{"brand": "Lada"}')
        message = json.loads(event.to_message())
        assert message["event"] == "Create Car"
        assert message["id"] == "c1"
        assert message["payload"] == {"brand": "Lada"}


class TestEventDispatcher:

    @pytest.mark.asyncio
    async def test_publishes_in_background(self):
        publisher = LoggingEventPublisher()
        dispatcher = EventDispatcher(publisher, channel_prefix="test.")
        address = snapshot()

        dispatcher.emit_created(EntityKind.ADDRESS, address.id, address)
        await dispatcher.drain()

        channel, message = publisher.published[0]
        assert channel == "test.address-topic"
        assert json.loads(message)["payload"]["city"] == "Moscow"
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, caplog):
        publisher = AsyncMock()
        publisher.publish.side_effect = ConnectionError("sink down")
        dispatcher = EventDispatcher(publisher)

        dispatcher.emit_created(EntityKind.CAR, "c1", snapshot())
        await dispatcher.drain()

        assert "Failed to publish 'Create Car'" in caplog.text

    @pytest.mark.asyncio
    async def test_disabled(self):
        publisher = AsyncMock()
        dispatcher = EventDispatcher(publisher, enabled=False)
        dispatcher.emit_created(EntityKind.CAR, "c1", snapshot())
        await dispatcher.drain()
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_logging_publisher_keeps_recent(self):
        publisher = LoggingEventPublisher(keep=2)
        for i in range(3):
            await publisher.publish("car-topic", str(i))
        assert [message for _, message in publisher.published] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_redis_publisher_uses_adapter_client(self):
        adapter = MagicMock()
        adapter.client.publish = AsyncMock(return_value=1)
        await RedisEventPublisher(adapter).publish("car-topic", "{}")
        adapter.client.publish.assert_awaited_once_with("car-topic", "{}")


class TestServiceEvents:

    @pytest.mark.asyncio
    async def test_creates_emit_events(self, container, publisher, user, add_car, add_parking):
        owner, _ = user
        car = await add_car(owner.id)
        parking = await add_parking()
        await container.events.drain()

        channels = [channel for channel, _ in publisher.published]
        assert channels == ["identity-topic", "car-topic", "parking-topic"]
        car_event = json.loads(publisher.published[1][1])
        assert car_event["id"] == str(car.id)
        assert car_event["payload"]["identity"]["id"] == str(owner.id)
        assert json.loads(publisher.published[2][1])["id"] == str(parking.id)

    @pytest.mark.asyncio
    async def test_updates_do_not_emit(self, container, publisher, add_parking):
        parking = await add_parking()
        await container.events.drain()
        published = len(publisher.published)
        await container.parking.update(ParkingUpdateRequest(id=parking.id, price=1))
        await container.events.drain()
        assert len(publisher.published) == published
