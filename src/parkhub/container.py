"""Lifecycle container: builds the store, cache, event sink and services.

Collaborators are explicit constructor arguments throughout the package; this
module is the one place that decides which implementations are wired
together, and it owns their startup and shutdown.
"""

import logging
from typing import Optional

from .config.logging_config import setup_logging
from .config.settings import ParkhubSettings, get_settings
from .features.addresses.services.address_service import AddressService
from .features.auth.services.authenticator import CredentialAuthenticator
from .features.auth.services.authorization_interceptor import AuthorizationInterceptor
from .features.auth.utils.passwords import PasswordHasher
from .features.cache.adapters.memory_adapter import MemoryAdapter
from .features.cache.adapters.redis_adapter import RedisAdapter
from .features.cache.entities.config import CacheConfig
from .features.cache.entities.protocols import Cache
from .features.cars.services.car_service import CarService
from .features.coherence.services.coordinator import CacheCoordinator
from .features.database.entities.config import DatabaseConfig
from .features.database.entities.protocols import RelationalStore
from .features.database.repositories.asyncpg_store import AsyncPGStore
from .features.database.repositories.memory_store import InMemoryStore
from .features.events.adapters.logging_publisher import LoggingEventPublisher
from .features.events.adapters.redis_publisher import RedisEventPublisher
from .features.events.entities.protocols import EventPublisher
from .features.events.services.event_dispatcher import EventDispatcher
from .features.identities.services.identity_service import IdentityService
from .features.parking.services.parking_service import ParkingService
from .service import ParkhubService

logger = logging.getLogger(__name__)


class ParkhubContainer:
    """Owns every long-lived component of the service layer."""

    def __init__(
        self,
        settings: ParkhubSettings,
        store: RelationalStore,
        cache: Cache,
        publisher: Optional[EventPublisher] = None,
        configure_logging: bool = True,
    ):
        self.settings = settings
        self.store = store
        self.cache = cache
        self.publisher = publisher or LoggingEventPublisher()
        self._configure_logging = configure_logging
        self._started = False

        self.hasher = PasswordHasher(settings.password_hash_iterations)
        self.coordinator = CacheCoordinator(store, cache)
        self.events = EventDispatcher(
            self.publisher,
            channel_prefix=settings.events_channel_prefix,
            enabled=settings.events_enabled,
        )

        self.identities = IdentityService(self.coordinator, self.hasher, self.events)
        self.cars = CarService(self.coordinator, self.events)
        self.addresses = AddressService(self.coordinator)
        self.parking = ParkingService(self.coordinator, self.events)

        self.authenticator = CredentialAuthenticator(store, self.hasher)
        self.interceptor = AuthorizationInterceptor(store, self.authenticator)
        self.service = ParkhubService(
            self.interceptor, self.identities, self.cars, self.addresses, self.parking
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ParkhubSettings] = None,
        store: Optional[RelationalStore] = None,
        cache: Optional[Cache] = None,
        publisher: Optional[EventPublisher] = None,
        configure_logging: bool = True,
    ) -> "ParkhubContainer":
        """Build the container, choosing backends from settings unless given."""
        settings = settings or get_settings()

        if store is None:
            if settings.store_backend == "postgres":
                store = AsyncPGStore(DatabaseConfig.from_settings(settings), log_sql=settings.enable_sql_logging)
            else:
                store = InMemoryStore(lock_timeout=settings.db_lock_timeout_ms / 1000)

        if cache is None:
            cache_config = CacheConfig.from_settings(settings)
            cache = RedisAdapter(cache_config) if settings.cache_backend == "redis" else MemoryAdapter(cache_config)

        if publisher is None and isinstance(cache, RedisAdapter):
            publisher = RedisEventPublisher(cache)

        return cls(settings, store, cache, publisher, configure_logging=configure_logging)

    async def startup(self) -> None:
        if self._started:
            return
        if self._configure_logging:
            setup_logging(self.settings)

        await self.store.connect()
        if self.settings.db_create_schema and isinstance(self.store, AsyncPGStore):
            await self.store.create_schema()
        await self.cache.connect()

        self._started = True
        logger.info(
            f"{self.settings.app_name} started: store={type(self.store).__name__}, "
            f"cache={type(self.cache).__name__}, events={type(self.publisher).__name__}"
        )

    async def shutdown(self) -> None:
        if not self._started:
            return
        try:
            await self.events.drain()
            await self.cache.disconnect()
        finally:
            await self.store.close()
            self._started = False
        logger.info(f"{self.settings.app_name} stopped")

    async def __aenter__(self) -> "ParkhubContainer":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
