"""Shipment service: attach or update an order's shipment and track delivery.

Creating the first shipment for an order marks the order shipped; a
shipment reported delivered marks the order delivered. Both commit and
then invalidate the cached order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.order import ShipmentResult, ShipmentUpsert
from app.application.interfaces.services import ICacheService
from app.application.services.order_service import invalidate_order, shipment_to_result
from app.domain.enums import OrderStatus, ShipmentStatus
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.models.shipment import Shipment
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.infrastructure.persistence.repositories.order_repo import OrderRepository
    from app.infrastructure.persistence.repositories.shipment_repo import (
        ShipmentRepository,
    )

logger = get_logger(__name__)


class ShipmentService:
    def __init__(
        self,
        order_repo: OrderRepository,
        shipment_repo: ShipmentRepository,
        cache: ICacheService,
    ) -> None:
        self.order_repo = order_repo
        self.shipment_repo = shipment_repo
        self.cache = cache

    async def create_or_update_shipment(
        self, order_id: str, data: ShipmentUpsert
    ) -> ShipmentResult:
        """Create the order's shipment, or overwrite the existing one.

        Raises:
            ResourceNotFoundException: If the order does not exist.
        """
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundException("order", order_id)
        now = utc_now()
        shipment = order.shipment
        if shipment is None:
            shipment = await self.shipment_repo.create(
                Shipment(
                    order_id=order_id,
                    awb_number=data.awb_number,
                    delivery_partner=data.delivery_partner,
                    status=data.status.value,
                    tracking_url=data.tracking_url,
                    last_updated_at=now,
                )
            )
            order.status = OrderStatus.SHIPPED.value
            logger.info("Created shipment %s for order %s", shipment.id, order_id)
        else:
            shipment.awb_number = data.awb_number
            shipment.delivery_partner = data.delivery_partner
            shipment.status = data.status.value
            shipment.tracking_url = data.tracking_url
            shipment.last_updated_at = now
            shipment = await self.shipment_repo.update(shipment)
        order.updated_at = now
        await self.order_repo.update(order)
        await self.order_repo.commit()
        await invalidate_order(self.cache, order_id)
        return shipment_to_result(shipment)

    async def update_shipment_status(
        self, shipment_id: str, status: ShipmentStatus
    ) -> ShipmentResult:
        """Set the carrier status; DELIVERED also marks the order delivered.

        Raises:
            ResourceNotFoundException: If the shipment (or its order) does not exist.
        """
        shipment = await self.shipment_repo.get_by_id(shipment_id)
        if shipment is None:
            raise ResourceNotFoundException("shipment", shipment_id)
        order = await self.order_repo.get_by_id(shipment.order_id)
        if order is None:
            raise ResourceNotFoundException("order", shipment.order_id)
        now = utc_now()
        shipment.status = status.value
        shipment.last_updated_at = now
        shipment = await self.shipment_repo.update(shipment)
        if status is ShipmentStatus.DELIVERED:
            order.status = OrderStatus.DELIVERED.value
        order.updated_at = now
        await self.order_repo.update(order)
        await self.order_repo.commit()
        await invalidate_order(self.cache, shipment.order_id)
        return shipment_to_result(shipment)
