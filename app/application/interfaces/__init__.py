"""Application interfaces (ports): service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.services import (
    IBlobStorageService,
    ICacheService,
    IConcurrencyLimiter,
    IOrderNumberGenerator,
)

__all__ = [
    "IBlobStorageService",
    "ICacheService",
    "IConcurrencyLimiter",
    "IOrderNumberGenerator",
]
