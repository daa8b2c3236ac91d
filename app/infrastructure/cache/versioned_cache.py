"""Versioned cache: logical keys over a physical key-value store.

Every logical key has a version counter (starting at 0). Values live under
the physical key ``<logical key>:v<version>``. Invalidation bumps the
version instead of deleting-then-rewriting, so a reader racing a writer
sees either the old generation or the new one, never a half-invalidated
state. Superseded physical keys are deleted best-effort and otherwise age
out through their own TTL.

Keys are grouped by tag (the segment before the first ``:``) so that
remove_by_pattern only scans keys sharing a tag rather than the whole store.
The tag index is in-process: after a restart it starts empty and pattern
invalidation only sees keys written since, bounded by each entry's TTL.

The cache is a pure accelerator. No method raises on backing-store faults,
whatever their type; they are logged and treated as a miss.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from app.core.constants import CACHE_KEY_SEP, CACHE_VERSION_MARKER, CACHE_WILDCARD
from app.infrastructure.cache.cache_protocol import KeyValueStore
from app.infrastructure.cache.lookup import CacheLookup

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 1800


def tag_of(key: str) -> str:
    """Return the tag of a logical key: everything before the first separator."""
    return key.split(CACHE_KEY_SEP, 1)[0]


class VersionedCache:
    """Read-through cache with O(1) logical deletion and prefix invalidation.

    One instance owns its version table and tag index; build it once at
    process start (see app.core.container) and share it. Tests create
    isolated instances.

    All mutation of the version table and tag index happens between await
    points, so each step is atomic with respect to other tasks on the loop.
    """

    def __init__(
        self, store: KeyValueStore, default_ttl: int = DEFAULT_TTL_SECONDS
    ) -> None:
        """Initialize the cache.

        Args:
            store: Physical key-value store (Redis or in-memory).
            default_ttl: Expiry in seconds when set() is called without ttl.
        """
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.store = store
        self.default_ttl = default_ttl
        self._versions: dict[str, int] = {}
        self._tags: dict[str, set[str]] = {}

    def is_available(self) -> bool:
        """Return True if the backing store is connected."""
        return self.store.is_available()

    def version_of(self, key: str) -> int:
        """Return the current version of key (0 if never seen)."""
        return self._versions.get(key, 0)

    def _physical_key(self, key: str, *, create: bool = False) -> str:
        if create:
            version = self._versions.setdefault(key, 0)
        else:
            version = self._versions.get(key, 0)
        return f"{key}{CACHE_KEY_SEP}{CACHE_VERSION_MARKER}{version}"

    async def get(self, key: str) -> CacheLookup:
        """Return the value cached under key's current version.

        Args:
            key: Logical cache key (use app.infrastructure.cache.keys builders).

        Returns:
            CacheLookup hit, or a miss when absent, undecodable or on store fault.
        """
        physical = self._physical_key(key)
        try:
            raw = await self.store.get(physical)
        except Exception:
            logger.warning("Cache get failed for key %s; treating as miss", key, exc_info=True)
            return CacheLookup.miss()
        if raw is None:
            logger.debug("Cache MISS: %s", physical)
            return CacheLookup.miss()
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.exception("Cache entry for key %s could not be decoded", key)
            return CacheLookup.miss()
        logger.debug("Cache HIT: %s", physical)
        return CacheLookup.hit(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value under key's current version and index key by its tag.

        Args:
            key: Logical cache key.
            value: JSON-serializable value.
            ttl: Time-to-live in seconds; default_ttl when None.
        """
        expiry = ttl if ttl is not None else self.default_ttl
        physical = self._physical_key(key, create=True)
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("Cache value for key %s is not JSON-serializable", key)
            return
        self._tags.setdefault(tag_of(key), set()).add(key)
        try:
            await self.store.set(physical, serialized, expiry)
        except Exception:
            logger.warning("Cache set failed for key %s", key, exc_info=True)
            return
        logger.debug("Cache SET: %s (TTL: %ss)", physical, expiry)

    async def remove(self, key: str) -> None:
        """Invalidate key: bump its version, then drop the superseded entry.

        The increment happens before any await, so concurrent removes of the
        same key never lose an increment. Calling remove twice only moves the
        version forward twice.
        """
        old_version = self._versions.get(key, 0)
        self._versions[key] = old_version + 1
        self._untrack(key)
        superseded = f"{key}{CACHE_KEY_SEP}{CACHE_VERSION_MARKER}{old_version}"
        try:
            await self.store.delete(superseded)
        except Exception:
            logger.warning(
                "Cache delete of superseded entry %s failed; it will expire by TTL",
                superseded,
                exc_info=True,
            )
        logger.info("Invalidated cache key: %s (now v%s)", key, old_version + 1)

    async def remove_by_pattern(self, pattern: str) -> None:
        """Invalidate every indexed key starting with pattern.

        A trailing '*' is stripped; the rest is a case-insensitive prefix.
        There is no glob support beyond that.

        Args:
            pattern: Prefix, by convention ending with '*' (e.g. "items:all*").
        """
        prefix = pattern.removesuffix(CACHE_WILDCARD).lower()
        matches = [key for key in self._candidates(prefix) if key.lower().startswith(prefix)]
        for key in matches:
            await self.remove(key)
        logger.info(
            "Invalidated %s cache keys matching pattern: %s", len(matches), pattern
        )

    def _candidates(self, prefix: str) -> list[str]:
        """Snapshot the logical keys whose tag could match prefix.

        If prefix contains the separator, only its own tag can match; otherwise
        any tag starting with prefix can (e.g. "item" matches "item" and "items").
        """
        if CACHE_KEY_SEP in prefix:
            wanted = tag_of(prefix)
            tags = [tag for tag in self._tags if tag.lower() == wanted]
        else:
            tags = [tag for tag in self._tags if tag.lower().startswith(prefix)]
        return [key for tag in tags for key in list(self._tags.get(tag, ()))]

    def _untrack(self, key: str) -> None:
        tag = tag_of(key)
        keys = self._tags.get(tag)
        if keys is None:
            return
        keys.discard(key)
        if not keys:
            del self._tags[tag]
