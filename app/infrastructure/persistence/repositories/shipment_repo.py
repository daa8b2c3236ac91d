"""Shipment repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.shipment import Shipment
from app.infrastructure.persistence.repositories.base import BaseRepository


class ShipmentRepository(BaseRepository[Shipment]):
    """Shipments are created and updated through the order's shipment endpoint only."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Shipment)
