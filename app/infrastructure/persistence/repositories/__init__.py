"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.item_repo import ItemRepository
from app.infrastructure.persistence.repositories.order_repo import OrderRepository
from app.infrastructure.persistence.repositories.shipment_repo import ShipmentRepository

__all__ = [
    "BaseRepository",
    "ItemRepository",
    "OrderRepository",
    "ShipmentRepository",
]
