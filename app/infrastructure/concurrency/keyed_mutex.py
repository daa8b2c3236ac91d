"""Per-resource-key admission limiter.

Each resource key (an item id, or a collection key such as "items:read")
gets its own counting gate that admits at most max_concurrent operations at
a time. This throttles a burst of identical requests without serializing
them, and distinct keys never contend.

Gates are created lazily under a single creation lock. By default they are
kept for the process lifetime, so memory grows with the number of distinct
keys ever seen. Set max_gates to evict the least recently used idle gates;
a gate with holders or waiters is never evicted.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENT = 10


class _Gate:
    """A semaphore plus the number of tasks holding or waiting on it."""

    __slots__ = ("semaphore", "users")

    def __init__(self, permits: int) -> None:
        self.semaphore = asyncio.Semaphore(permits)
        self.users = 0


class KeyedMutex:
    """Registry of per-key gates bounding concurrent operations per resource.

    Build one instance at process start (see app.core.container) and share
    it; tests create isolated instances.
    """

    def __init__(
        self,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        max_gates: int | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            max_concurrent: Permits per resource key (N-way, not 1-way).
            max_gates: Optional bound on retained gates; idle gates beyond it
                are evicted least recently used first. None keeps all gates.
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        if max_gates is not None and max_gates < 1:
            raise ValueError(f"max_gates must be >= 1 when set, got {max_gates}")
        self.max_concurrent = max_concurrent
        self.max_gates = max_gates
        self._gates: OrderedDict[str, _Gate] = OrderedDict()
        self._creation_lock = asyncio.Lock()

    @property
    def gate_count(self) -> int:
        """Number of gates currently retained."""
        return len(self._gates)

    async def _checkout_gate(self, resource_key: str) -> _Gate:
        """Return the gate for resource_key, creating it if needed, and mark it in use.

        The user count is incremented under the creation lock so eviction
        never removes a gate someone is about to wait on.
        """
        async with self._creation_lock:
            gate = self._gates.get(resource_key)
            if gate is None:
                gate = _Gate(self.max_concurrent)
                self._gates[resource_key] = gate
                logger.debug("Created gate for %s (%s permits)", resource_key, self.max_concurrent)
            else:
                self._gates.move_to_end(resource_key)
            gate.users += 1
            self._evict_idle()
            return gate

    def _evict_idle(self) -> None:
        if self.max_gates is None:
            return
        excess = len(self._gates) - self.max_gates
        if excess <= 0:
            return
        for key in [k for k, g in self._gates.items() if g.users == 0][:excess]:
            del self._gates[key]
            logger.debug("Evicted idle gate for %s", key)

    async def run_exclusive(
        self, resource_key: str, operation: Callable[[], Awaitable[T]]
    ) -> T:
        """Run operation once a permit for resource_key is available.

        Waits indefinitely; callers needing a deadline wrap this call in
        asyncio.wait_for / asyncio.timeout. The permit is released on every
        exit path (return, exception, cancellation). Errors from operation
        propagate unchanged.

        Args:
            resource_key: Unit of contention (e.g. "item:<id>", "items:read").
            operation: Zero-argument coroutine function to run.

        Returns:
            Whatever operation returns.
        """
        gate = await self._checkout_gate(resource_key)
        try:
            async with gate.semaphore:
                return await operation()
        finally:
            gate.users -= 1
