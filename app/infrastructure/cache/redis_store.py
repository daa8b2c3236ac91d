"""Redis-backed key-value store for VersionedCache.

Provides async raw get/set/delete against physical (versioned) keys.
Connection handling follows a connect-at-startup / disconnect-at-shutdown
lifecycle; a dropped connection triggers one reconnect attempt per call.
Faults are raised as CacheBackendError for VersionedCache to absorb.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import redis.asyncio as redis

from app.core.config import Settings, get_settings
from app.infrastructure.cache.cache_protocol import CacheBackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisKeyValueStore:
    """Async Redis store with TTL support.

    Uses app.core.config for connection settings. Call connect() at startup
    and disconnect() at shutdown.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            redis_client: Optional Redis client for testing or DI. When given,
                the store is considered connected.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.RedisError, OSError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Drop the current client and connect again. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except (redis.RedisError, OSError):
            logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _call(self, op: str, key: str, fn: Callable[[redis.Redis], Awaitable[T]]) -> T:
        """Run fn against the client, reconnecting once on connection loss.

        Raises:
            CacheBackendError: If the store is unavailable, the call fails or
                reconnecting fails.
        """
        if not self.is_available() or self.redis is None:
            raise CacheBackendError(f"Redis unavailable for {op} {key}")
        try:
            return await fn(self.redis)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            lost = e
        except redis.RedisError as e:
            raise CacheBackendError(f"Redis {op} failed for {key}") from e

        logger.warning("Redis connection lost during %s %s; reconnecting", op, key)
        try:
            reconnected = await self._reconnect()
        except (redis.RedisError, OSError) as e:
            raise CacheBackendError(f"Redis reconnect failed during {op} {key}") from e
        if not reconnected or self.redis is None:
            raise CacheBackendError(f"Redis {op} unavailable for {key}") from lost
        try:
            return await fn(self.redis)
        except redis.RedisError as e:
            raise CacheBackendError(f"Redis {op} failed for {key} after reconnect") from e

    async def get(self, key: str) -> str | None:
        return await self._call("get", key, lambda client: client.get(key))

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._call("set", key, lambda client: client.setex(key, ttl, value))

    async def delete(self, key: str) -> None:
        await self._call("delete", key, lambda client: client.unlink(key))
