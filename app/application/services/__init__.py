"""Application services: catalog items, orders and shipments."""

from app.application.services.item_service import ItemService
from app.application.services.order_service import OrderService
from app.application.services.shipment_service import ShipmentService

__all__ = ["ItemService", "OrderService", "ShipmentService"]
