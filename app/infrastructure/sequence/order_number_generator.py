"""Order number generation: PREFIX-YYYYMMDD-NNNN, unique per UTC day.

The next number is derived from the order store (highest existing number
for today's prefix, plus one) rather than from an in-memory counter, so a
restart never loses its place. Generation is serialized by one process-wide
lock; the critical section holds exactly one store query.

Within a process, the last number issued per day is also remembered, so a
caller that has not yet committed its order cannot cause the next caller to
receive the same number. Across processes, the unique constraint on
order.order_number is the only guard.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.exceptions import SequenceGenerationError
from app.infrastructure.persistence.repositories.order_repo import OrderRepository
from app.shared.utils.datetime import utc_day_stamp, utc_now
from app.shared.utils.generators import (
    format_order_number,
    order_number_day_prefix,
    parse_order_sequence,
)

logger = logging.getLogger(__name__)

_PREFIX_RE = re.compile(r"^[A-Z]+$")


class OrderNumberSource(Protocol):
    """Read side of the order store used by OrderNumberGenerator."""

    async def get_max_order_number(self, prefix: str) -> str | None:
        """Return the highest order number starting with prefix, or None.

        "Highest" is by numeric sequence, so PREFIX-D-10000 ranks above
        PREFIX-D-9999.
        """
        ...


class SessionOrderNumberSource:
    """OrderNumberSource that runs each query in its own short-lived session.

    Keeps the generator's critical section independent of the caller's
    order-creation transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_max_order_number(self, prefix: str) -> str | None:
        async with self.session_factory() as session:
            return await OrderRepository(session).get_max_order_number(prefix)


class OrderNumberGenerator:
    """Serialized, day-scoped order number generator."""

    def __init__(
        self,
        source: OrderNumberSource,
        prefix: str = "ORD",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the generator.

        Args:
            source: Store queried for the highest existing number.
            prefix: Uppercase letters leading every order number.
            clock: Returns the current time; the UTC date scopes the sequence.
        """
        if not _PREFIX_RE.fullmatch(prefix):
            raise ValueError(f"Order number prefix must be uppercase letters, got {prefix!r}")
        self.source = source
        self.prefix = prefix
        self.clock = clock
        self._lock = asyncio.Lock()
        # day stamp -> highest sequence issued by this process
        self._issued: dict[str, int] = {}

    async def next(self) -> str:
        """Return the next order number for the current UTC day.

        Raises:
            SequenceGenerationError: If the store query fails or the stored
                highest number cannot be parsed.
        """
        async with self._lock:
            day = utc_day_stamp(self.clock())
            day_prefix = order_number_day_prefix(self.prefix, day)
            try:
                last = await self.source.get_max_order_number(day_prefix)
            except (SQLAlchemyError, OSError) as e:
                logger.exception("Order number lookup failed for %s", day_prefix)
                raise SequenceGenerationError(
                    f"Could not read the latest order number for {day_prefix}",
                    prefix=day_prefix,
                ) from e
            stored = 0
            if last is not None:
                try:
                    stored = parse_order_sequence(last, day_prefix)
                except ValueError as e:
                    logger.error("Unparseable order number in store: %s", last)
                    raise SequenceGenerationError(
                        f"Stored order number {last!r} does not match {day_prefix}NNNN",
                        prefix=day_prefix,
                    ) from e
            sequence = max(stored, self._issued.get(day, 0)) + 1
            # Only today's high-water mark is ever consulted again.
            self._issued = {day: sequence}
            order_number = format_order_number(self.prefix, day, sequence)
            logger.debug("Issued order number %s", order_number)
            return order_number
