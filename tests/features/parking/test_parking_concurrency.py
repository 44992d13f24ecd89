"""Concurrent assignment batches."""

import asyncio

import pytest

from parkhub.features.parking.models.requests import ParkingCarRequest
from parkhub.features.parking.repositories.parking_repository import ParkingRepository


def pairs(parkings, cars):
    return [ParkingCarRequest(parking_id=p.id, car_id=c.id) for p in parkings for c in cars]


class TestConcurrentAssignment:

    @pytest.mark.asyncio
    async def test_overlapping_batches_serialize_on_parking_lock(
        self, container, monkeypatch, user, add_car, add_parking
    ):
        """Each batch yields between reading the links and writing them.

        The second batch can only read the links once the first batch has
        committed, so the shared car is seen as linked and not inserted twice.
        """
        owner, _ = user
        cars = [await add_car(owner.id) for _ in range(3)]
        parking = await add_parking()
        reads = []
        original = ParkingRepository.linked_car_ids

        async def linked_car_ids(repository, parking_id):
            current = await original(repository, parking_id)
            reads.append(set(current))
            for _ in range(5):
                await asyncio.sleep(0)
            return current

        monkeypatch.setattr(ParkingRepository, "linked_car_ids", linked_car_ids)
        await asyncio.gather(
            container.parking.add_cars(pairs([parking], cars[:2])),
            container.parking.add_cars(pairs([parking], cars[1:])),
        )
        monkeypatch.undo()

        assert len(reads[2]) == 2
        snapshot = await container.parking.find_by_id(parking.id)
        assert {c.id for c in snapshot.cars} == {c.id for c in cars}

    @pytest.mark.asyncio
    async def test_reversed_batches_do_not_deadlock(self, container, user, add_car, add_parking):
        owner, _ = user
        cars = [await add_car(owner.id) for _ in range(2)]
        parkings = [await add_parking() for _ in range(2)]
        forward = pairs(parkings, cars)

        await asyncio.wait_for(
            asyncio.gather(
                container.parking.add_cars(forward),
                container.parking.add_cars(list(reversed(forward))),
            ),
            timeout=1.5,
        )

        for parking in parkings:
            assert len((await container.parking.find_by_id(parking.id)).cars) == 2

    @pytest.mark.asyncio
    async def test_add_and_remove_interleaved(self, container, user, add_car, add_parking):
        owner, _ = user
        cars = [await add_car(owner.id) for _ in range(3)]
        parking = await add_parking()
        await container.parking.add_cars(pairs([parking], cars[:1]))

        await asyncio.gather(
            container.parking.remove_cars(pairs([parking], cars[:1])),
            container.parking.add_cars(pairs([parking], cars[1:])),
        )

        snapshot = await container.parking.find_by_id(parking.id)
        assert {c.id for c in snapshot.cars} == {cars[1].id, cars[2].id}

    @pytest.mark.asyncio
    async def test_concurrent_reads_during_writes(self, container, user, add_car, add_parking):
        owner, _ = user
        cars = [await add_car(owner.id) for _ in range(3)]
        parking = await add_parking()

        await asyncio.gather(*(
            container.parking.add_cars(pairs([parking], [car])) for car in cars
        ), *(container.parking.find_by_id(parking.id) for _ in range(3)))

        snapshot = await container.parking.find_by_id(parking.id)
        assert len(snapshot.cars) == 3
