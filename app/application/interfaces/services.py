"""Service interfaces (ports) for the application layer.

Protocols define contracts the application services consume (DIP):
the versioned cache, the per-key admission limiter, the order number
generator and blob storage for item images.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:
    from app.infrastructure.cache.lookup import CacheLookup

T = TypeVar("T")


class ICacheService(Protocol):
    """Logical cache with versioned invalidation. Never raises on backend faults."""

    async def get(self, key: str) -> CacheLookup:
        """Return a hit with the cached value, or a miss."""

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a JSON-serializable value with optional TTL in seconds."""

    async def remove(self, key: str) -> None:
        """Invalidate a single logical key."""

    async def remove_by_pattern(self, pattern: str) -> None:
        """Invalidate every key starting with pattern (trailing '*' stripped)."""


class IConcurrencyLimiter(Protocol):
    """Bounds concurrent operations per resource key."""

    async def run_exclusive(
        self, resource_key: str, operation: Callable[[], Awaitable[T]]
    ) -> T:
        """Run operation once a permit for resource_key is free."""


class IOrderNumberGenerator(Protocol):
    """Issues unique, day-scoped order numbers."""

    async def next(self) -> str:
        """Return the next order number (PREFIX-YYYYMMDD-NNNN)."""


class IBlobStorageService(Protocol):
    """Blob storage for item images (implemented outside this package)."""

    async def upload_image(self, data: bytes, file_name: str, content_type: str) -> str:
        """Upload image bytes and return the public URL of the blob."""

    async def delete_image(self, blob_name: str) -> None:
        """Delete a previously uploaded blob by name."""
