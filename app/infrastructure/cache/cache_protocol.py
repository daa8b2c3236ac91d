"""Cache protocols: the backing key-value store behind VersionedCache."""

from typing import Protocol


class CacheBackendError(Exception):
    """Raised by a KeyValueStore when the backing store faults.

    Never escapes VersionedCache: it is caught, logged and treated as a miss.
    """


class KeyValueStore(Protocol):
    """Protocol for the physical store behind VersionedCache (e.g. Redis).

    Implementations raise CacheBackendError on faults instead of returning
    sentinel values, so the cache can log and degrade in one place.
    """

    def is_available(self) -> bool:
        """Return True if the store is connected and usable."""
        ...

    async def get(self, key: str) -> str | None:
        """Return the raw value for a physical key, or None if absent."""
        ...

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store a raw value with TTL in seconds."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a physical key (no error if missing)."""
        ...
