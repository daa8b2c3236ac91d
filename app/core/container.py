"""Process-wide component wiring: startup and shutdown.

Builds exactly one VersionedCache, KeyedMutex and OrderNumberGenerator per
process and hands them to per-request services. No business logic here,
only wiring of infrastructure.

Services commit their own writes through the session they are given, so
pass a plain session (not one inside session.begin()).

The backing store is chosen once at startup. If Redis is enabled but
unreachable then, the process keeps an in-process store until restart and
never retries Redis. With several processes this means each one caches on
its own and does not see the others' invalidations; keep entry TTLs short
or restart workers once Redis is back.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces.services import IBlobStorageService
from app.application.services import ItemService, OrderService, ShipmentService
from app.core.config import Settings, get_settings
from app.infrastructure.cache import (
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    VersionedCache,
)
from app.infrastructure.concurrency import KeyedMutex
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import (
    ItemRepository,
    OrderRepository,
    ShipmentRepository,
)
from app.infrastructure.sequence import OrderNumberGenerator, SessionOrderNumberSource
from app.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class Container:
    """Shared components; services are built per session via the factory methods."""

    settings: Settings
    store: KeyValueStore
    cache: VersionedCache
    mutex: KeyedMutex
    order_numbers: OrderNumberGenerator
    blob_storage: IBlobStorageService

    def item_service(self, session: AsyncSession) -> ItemService:
        return ItemService(
            ItemRepository(session),
            self.cache,
            self.mutex,
            self.blob_storage,
            cache_ttl=self.settings.cache_ttl_items,
        )

    def order_service(self, session: AsyncSession) -> OrderService:
        return OrderService(
            OrderRepository(session),
            ItemRepository(session),
            self.cache,
            self.mutex,
            self.order_numbers,
            cache_ttl=self.settings.cache_ttl_orders,
        )

    def shipment_service(self, session: AsyncSession) -> ShipmentService:
        return ShipmentService(
            OrderRepository(session), ShipmentRepository(session), self.cache
        )


async def create_container(
    blob_storage: IBlobStorageService,
    *,
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    store: KeyValueStore | None = None,
) -> Container:
    """Build and connect the shared components. Call once at startup.

    When redis_enabled is False (or no store is given and Redis is
    unreachable), the cache still works against an in-process store.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    if store is None:
        if settings.redis_enabled:
            redis_store = RedisKeyValueStore(settings=settings)
            await redis_store.connect()
            if redis_store.is_available():
                store = redis_store
            else:
                logger.warning(
                    "Redis unreachable at startup; using an in-process cache until restart"
                )
                store = InMemoryKeyValueStore()
        else:
            store = InMemoryKeyValueStore()
    logger.info("Cache backing store: %s", type(store).__name__)

    source = SessionOrderNumberSource(session_factory or get_session_factory())
    return Container(
        settings=settings,
        store=store,
        cache=VersionedCache(store, default_ttl=settings.cache_default_ttl_seconds),
        mutex=KeyedMutex(
            max_concurrent=settings.mutex_max_concurrent,
            max_gates=settings.mutex_max_gates,
        ),
        order_numbers=OrderNumberGenerator(source, prefix=settings.order_number_prefix),
        blob_storage=blob_storage,
    )


async def shutdown_container(container: Container) -> None:
    """Disconnect Redis (when used) and dispose the SQL engine."""
    if isinstance(container.store, RedisKeyValueStore):
        await container.store.disconnect()
        logger.info("Cache disconnected")
    await dispose_engine()
