"""Cache lookup result: hit with a value, or miss.

A miss covers absent entries, expired entries, decode failures and
backing-store faults alike. Callers check ``found`` instead of comparing the
value to None, so a cached None / [] / 0 is still a hit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheLookup:
    """Result of VersionedCache.get."""

    found: bool
    value: Any = None

    @classmethod
    def hit(cls, value: Any) -> CacheLookup:
        return cls(found=True, value=value)

    @classmethod
    def miss(cls) -> CacheLookup:
        return _MISS

    def __bool__(self) -> bool:
        return self.found


_MISS = CacheLookup(found=False)
