"""Application layer: interfaces, DTOs and services.

Depends on domain and protocol definitions (DIP). Infrastructure supplies
the cache, concurrency limiter, order number generator and repositories.
"""

from app.application.interfaces import (
    IBlobStorageService,
    ICacheService,
    IConcurrencyLimiter,
    IOrderNumberGenerator,
)
from app.application.services import ItemService, OrderService, ShipmentService

__all__ = [
    "IBlobStorageService",
    "ICacheService",
    "IConcurrencyLimiter",
    "IOrderNumberGenerator",
    "ItemService",
    "OrderService",
    "ShipmentService",
]
