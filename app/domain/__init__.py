"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import OrderSource, OrderStatus, ShipmentStatus
from app.domain.exceptions import (
    CatalogOrderException,
    CurrencyMismatchException,
    DuplicateOrderNumberException,
    ItemDeletedException,
    ResourceNotFoundException,
    SequenceGenerationError,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    # Enums
    "OrderSource",
    "OrderStatus",
    "ShipmentStatus",
    # Exceptions
    "CatalogOrderException",
    "CurrencyMismatchException",
    "DuplicateOrderNumberException",
    "ItemDeletedException",
    "ResourceNotFoundException",
    "SequenceGenerationError",
    "SqlNotConfiguredException",
    "ValidationException",
]
