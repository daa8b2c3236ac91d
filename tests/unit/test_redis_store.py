"""RedisKeyValueStore with a mocked redis.asyncio client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import redis.asyncio as redis

from app.core.config import Settings
from app.infrastructure.cache.cache_protocol import CacheBackendError
from app.infrastructure.cache.redis_store import RedisKeyValueStore


@pytest.fixture
def settings() -> Settings:
    return Settings(redis_host="cache.local", redis_port=6380)


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.mark.asyncio
async def test_get_set_delete_delegate_to_client(client, settings) -> None:
    client.get.return_value = '{"id": "1"}'
    store = RedisKeyValueStore(redis_client=client, settings=settings)

    assert store.is_available()
    assert await store.get("item:1:v0") == '{"id": "1"}'
    await store.set("item:1:v0", '{"id": "1"}', 600)
    await store.delete("item:1:v0")

    client.get.assert_awaited_once_with("item:1:v0")
    client.setex.assert_awaited_once_with("item:1:v0", 600, '{"id": "1"}')
    client.unlink.assert_awaited_once_with("item:1:v0")


@pytest.mark.asyncio
async def test_unavailable_store_raises_backend_error(settings) -> None:
    store = RedisKeyValueStore(settings=settings)
    assert not store.is_available()
    with pytest.raises(CacheBackendError):
        await store.get("item:1:v0")


@pytest.mark.asyncio
async def test_redis_error_wrapped(client, settings) -> None:
    client.setex.side_effect = redis.ResponseError("OOM")
    store = RedisKeyValueStore(redis_client=client, settings=settings)
    with pytest.raises(CacheBackendError):
        await store.set("item:1:v0", "x", 60)


@pytest.mark.asyncio
async def test_connection_loss_reconnects_once(client, settings) -> None:
    client.get.side_effect = redis.ConnectionError("reset")
    fresh = AsyncMock()
    fresh.get.return_value = "value"
    store = RedisKeyValueStore(redis_client=client, settings=settings)

    with patch("app.infrastructure.cache.redis_store.redis.Redis", return_value=fresh):
        assert await store.get("k") == "value"

    client.aclose.assert_awaited_once()
    fresh.ping.assert_awaited_once()
    assert store.redis is fresh


@pytest.mark.asyncio
async def test_failed_reconnect_raises_and_marks_unavailable(client, settings) -> None:
    client.get.side_effect = redis.TimeoutError("slow")
    fresh = AsyncMock()
    fresh.ping.side_effect = redis.ConnectionError("refused")
    store = RedisKeyValueStore(redis_client=client, settings=settings)

    with patch("app.infrastructure.cache.redis_store.redis.Redis", return_value=fresh):
        with pytest.raises(CacheBackendError):
            await store.get("k")
    assert not store.is_available()


@pytest.mark.asyncio
async def test_connect_uses_settings(settings) -> None:
    fresh = AsyncMock()
    with patch(
        "app.infrastructure.cache.redis_store.redis.Redis", return_value=fresh
    ) as factory:
        store = RedisKeyValueStore(settings=settings)
        await store.connect()

    kwargs = factory.call_args.kwargs
    assert kwargs["host"] == "cache.local"
    assert kwargs["port"] == 6380
    assert kwargs["decode_responses"] is True
    assert store.is_available()

    await store.disconnect()
    fresh.aclose.assert_awaited_once()
    assert not store.is_available()


def test_cache_works_over_redis_store_shape() -> None:
    """RedisKeyValueStore exposes the KeyValueStore surface."""
    store = RedisKeyValueStore(redis_client=MagicMock(), settings=Settings())
    for name in ("get", "set", "delete", "is_available"):
        assert callable(getattr(store, name))


@pytest.mark.asyncio
async def test_non_connection_error_during_reconnect_is_wrapped(client, settings) -> None:
    """A ResponseError from the reconnect ping surfaces as CacheBackendError."""
    client.get.side_effect = redis.ConnectionError("reset")
    fresh = AsyncMock()
    fresh.ping.side_effect = redis.ResponseError("NOAUTH Authentication required")
    store = RedisKeyValueStore(redis_client=client, settings=settings)

    with patch("app.infrastructure.cache.redis_store.redis.Redis", return_value=fresh):
        with pytest.raises(CacheBackendError):
            await store.get("item:1:v0")
    assert not store.is_available()


@pytest.mark.asyncio
async def test_connect_tolerates_any_redis_error(settings) -> None:
    fresh = AsyncMock()
    fresh.ping.side_effect = redis.ResponseError("NOAUTH Authentication required")
    with patch("app.infrastructure.cache.redis_store.redis.Redis", return_value=fresh):
        store = RedisKeyValueStore(settings=settings)
        await store.connect()
    assert not store.is_available()
