"""Pytest configuration and fixtures for parkhub tests."""

import itertools

import pytest
import pytest_asyncio

from parkhub.config.settings import ParkhubSettings
from parkhub.container import ParkhubContainer
from parkhub.features.auth.entities.caller import Credentials
from parkhub.features.cache.adapters.memory_adapter import MemoryAdapter
from parkhub.features.cars.models.requests import CarCreateRequest
from parkhub.features.database.repositories.memory_store import InMemoryStore
from parkhub.features.events.adapters.logging_publisher import LoggingEventPublisher
from parkhub.features.identities.entities.identity import Role
from parkhub.features.identities.models.requests import IdentityCreateRequest
from parkhub.features.parking.models.requests import ParkingCreateRequest

PASSWORD = "correct horse battery"

_sequence = itertools.count(1)


@pytest.fixture
def settings():
    """In-process backends and a cheap password hash."""
    return ParkhubSettings(
        _env_file=None,
        store_backend="memory",
        cache_backend="memory",
        password_hash_iterations=1000,
        db_lock_timeout_ms=2000,
    )


@pytest.fixture
def publisher():
    return LoggingEventPublisher()


@pytest_asyncio.fixture
async def container(settings, publisher):
    """Started container over the in-memory store and cache."""
    container = ParkhubContainer.from_settings(
        settings,
        store=InMemoryStore(lock_timeout=2.0),
        cache=MemoryAdapter(),
        publisher=publisher,
        configure_logging=False,
    )
    await container.startup()
    yield container
    await container.shutdown()


@pytest.fixture
def service(container):
    return container.service


@pytest.fixture
def cache(container):
    return container.cache


@pytest.fixture
def register(container):
    """Create an identity directly through the identity service.

    Returns the full projection and the credentials to act as it.
    """
    async def create(username=None, authority=Role.USER, password=PASSWORD, enabled=None):
        username = username or f"user{next(_sequence)}"
        response = await container.identities.create(IdentityCreateRequest(
            authority=authority,
            username=username,
            password=password,
            email=f"{username}@example.com",
            enabled=enabled,
            firstname="Ivan",
            lastname="Petrov",
            patronymic="Sergeevich",
        ))
        return response, Credentials(email=response.email, password=password)
    return create


@pytest.fixture
def add_car(container):
    async def create(owner_id, model=None, brand="Lada"):
        model = model or f"Model {next(_sequence)}"
        return await container.cars.create(CarCreateRequest(
            brand=brand,
            model=model,
            description=f"{brand} {model} description",
            identity_id=owner_id,
        ))
    return create


@pytest.fixture
def add_parking(container):
    async def create(price=100, city="Moscow", street=None, house="1"):
        street = street or f"Street {next(_sequence)}"
        return await container.parking.create(ParkingCreateRequest(
            address={"city": city, "street": street, "house": house},
            price=price,
        ))
    return create


@pytest_asyncio.fixture
async def admin(register):
    return await register("admin", authority=Role.ADMIN)


@pytest_asyncio.fixture
async def user(register):
    return await register("alice")


@pytest_asyncio.fixture
async def other_user(register):
    return await register("bob")
