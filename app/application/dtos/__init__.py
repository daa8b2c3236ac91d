"""Application DTOs: read-models and inputs for catalog and order use cases."""

from app.application.dtos.item import DesignVariantResult, ImageUpload, ItemResult
from app.application.dtos.order import (
    OrderCreate,
    OrderItemResult,
    OrderLineCreate,
    OrderResult,
    ShipmentResult,
    ShipmentUpsert,
)

__all__ = [
    "DesignVariantResult",
    "ImageUpload",
    "ItemResult",
    "OrderCreate",
    "OrderItemResult",
    "OrderLineCreate",
    "OrderResult",
    "ShipmentResult",
    "ShipmentUpsert",
]
