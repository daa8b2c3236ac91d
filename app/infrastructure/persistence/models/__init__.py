"""Persistence models: ORM entities and mixins.

Importing this package registers every mapped class, so string-based
relationships (Order.shipment, Item.design_variants) resolve.
"""

from app.infrastructure.persistence.models.item import DesignVariant, Item
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.order import Order, OrderItem
from app.infrastructure.persistence.models.shipment import Shipment

__all__ = [
    "CuidMixin",
    "DesignVariant",
    "Item",
    "Order",
    "OrderItem",
    "Shipment",
    "SoftDeleteMixin",
    "TimestampMixin",
]
