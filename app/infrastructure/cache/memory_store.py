"""In-memory key-value store with per-key TTL.

Used when Redis is disabled and in unit tests. Single event loop only;
each operation completes without suspending, so no locking is needed.
"""

import time
from collections.abc import Callable


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore. Expired entries are dropped lazily on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[float, str]] = {}

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._data.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._data[key] = (self._clock() + ttl, value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Return stored physical keys, including not-yet-purged expired ones."""
        return list(self._data)
