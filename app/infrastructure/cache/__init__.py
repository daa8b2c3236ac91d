"""Cache: versioned cache, backing stores and cache key utilities.

Used by application services for read-through caching of items and orders.
VersionedCache owns key versions and the tag index; stores only see
physical keys. Key format is in keys.py (DRY).
"""

from app.infrastructure.cache.cache_protocol import (
    CacheBackendError,
    KeyValueStore,
)
from app.infrastructure.cache.keys import (
    item_key,
    items_list_key,
    items_list_pattern,
    order_key,
    orders_list_pattern,
)
from app.infrastructure.cache.lookup import CacheLookup
from app.infrastructure.cache.memory_store import InMemoryKeyValueStore
from app.infrastructure.cache.redis_store import RedisKeyValueStore
from app.infrastructure.cache.versioned_cache import VersionedCache

__all__ = [
    "CacheBackendError",
    "CacheLookup",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "VersionedCache",
    "item_key",
    "items_list_key",
    "items_list_pattern",
    "order_key",
    "orders_list_pattern",
]
