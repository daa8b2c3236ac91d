"""KeyedMutex: per-key N-way admission, isolation between keys, release on error."""

import asyncio

import pytest

from app.infrastructure.concurrency.keyed_mutex import KeyedMutex


class _Tracker:
    """Records peak concurrency of operations run through the mutex."""

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0

    async def op(self, hold: asyncio.Event | None = None, delay: float = 0.01) -> str:
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if hold is not None:
                await hold.wait()
            else:
                await asyncio.sleep(delay)
            return "done"
        finally:
            self.active -= 1


@pytest.mark.asyncio
async def test_at_most_max_concurrent_per_key() -> None:
    mutex = KeyedMutex(max_concurrent=3)
    tracker = _Tracker()

    results = await asyncio.gather(
        *(mutex.run_exclusive("item:1", tracker.op) for _ in range(12))
    )

    assert results == ["done"] * 12
    assert tracker.peak == 3


@pytest.mark.asyncio
async def test_concurrent_up_to_limit_without_serializing() -> None:
    mutex = KeyedMutex(max_concurrent=10)
    tracker = _Tracker()

    await asyncio.gather(*(mutex.run_exclusive("items:read", tracker.op) for _ in range(10)))

    assert tracker.peak == 10


@pytest.mark.asyncio
async def test_distinct_keys_do_not_contend() -> None:
    """A saturated key never blocks a different key."""
    mutex = KeyedMutex(max_concurrent=1)
    release = asyncio.Event()
    blocked = _Tracker()

    holder = asyncio.create_task(
        mutex.run_exclusive("item:a", lambda: blocked.op(hold=release))
    )
    await asyncio.sleep(0)

    result = await asyncio.wait_for(mutex.run_exclusive("item:b", lambda: _value(42)), 1)
    assert result == 42

    release.set()
    assert await holder == "done"


async def _value(value: int) -> int:
    return value


@pytest.mark.asyncio
async def test_error_propagates_and_permit_is_released() -> None:
    mutex = KeyedMutex(max_concurrent=1)

    async def boom() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await mutex.run_exclusive("item:1", boom)

    # The single permit is free again.
    assert await asyncio.wait_for(mutex.run_exclusive("item:1", lambda: _value(1)), 1) == 1


@pytest.mark.asyncio
async def test_cancellation_releases_permit() -> None:
    mutex = KeyedMutex(max_concurrent=1)
    never = asyncio.Event()
    tracker = _Tracker()

    task = asyncio.create_task(mutex.run_exclusive("item:1", lambda: tracker.op(hold=never)))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert await asyncio.wait_for(mutex.run_exclusive("item:1", lambda: _value(7)), 1) == 7


@pytest.mark.asyncio
async def test_timeout_is_callers_concern() -> None:
    mutex = KeyedMutex(max_concurrent=1)
    release = asyncio.Event()
    tracker = _Tracker()
    holder = asyncio.create_task(
        mutex.run_exclusive("orders:read", lambda: tracker.op(hold=release))
    )
    await asyncio.sleep(0)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(mutex.run_exclusive("orders:read", lambda: _value(1)), 0.05)

    release.set()
    await holder
    assert await mutex.run_exclusive("orders:read", lambda: _value(2)) == 2


@pytest.mark.asyncio
async def test_concurrent_first_use_creates_one_gate(mutex) -> None:
    tracker = _Tracker()
    await asyncio.gather(*(mutex.run_exclusive("item:new", tracker.op) for _ in range(5)))
    assert mutex.gate_count == 1


@pytest.mark.asyncio
async def test_gates_retained_without_bound(mutex) -> None:
    for i in range(20):
        await mutex.run_exclusive(f"item:{i}", lambda: _value(0))
    assert mutex.gate_count == 20


@pytest.mark.asyncio
async def test_idle_gates_evicted_beyond_max_gates() -> None:
    mutex = KeyedMutex(max_concurrent=2, max_gates=3)
    for i in range(10):
        await mutex.run_exclusive(f"item:{i}", lambda: _value(0))
    assert mutex.gate_count == 3
    assert list(mutex._gates) == ["item:7", "item:8", "item:9"]


@pytest.mark.asyncio
async def test_busy_gate_is_never_evicted() -> None:
    mutex = KeyedMutex(max_concurrent=1, max_gates=1)
    release = asyncio.Event()
    tracker = _Tracker()

    holder = asyncio.create_task(
        mutex.run_exclusive("item:busy", lambda: tracker.op(hold=release))
    )
    await asyncio.sleep(0)
    await mutex.run_exclusive("item:other", lambda: _value(0))

    assert "item:busy" in mutex._gates

    # A second caller on the busy key still queues on the same gate.
    waiter = asyncio.create_task(mutex.run_exclusive("item:busy", tracker.op))
    await asyncio.sleep(0)
    assert tracker.peak == 1
    release.set()
    await asyncio.gather(holder, waiter)
    assert tracker.peak == 1


@pytest.mark.parametrize("kwargs", [{"max_concurrent": 0}, {"max_gates": 0}])
def test_invalid_limits_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        KeyedMutex(**kwargs)
