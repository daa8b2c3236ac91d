"""DTOs for order and shipment use cases (no dependency on ORM).

Amounts are integers in minor units (cents). OrderResult round-trips
through the cache via order_to_dict / order_from_dict.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import OrderSource, OrderStatus, ShipmentStatus


@dataclass(frozen=True)
class OrderLineCreate:
    """One requested order line."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class OrderCreate:
    """Input for OrderService.create_order."""

    customer_name: str
    currency: str
    source: OrderSource
    items: list[OrderLineCreate]
    customer_email: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    delivery_date: datetime | None = None


@dataclass(frozen=True)
class ShipmentUpsert:
    """Input for ShipmentService.create_or_update_shipment."""

    awb_number: str = ""
    delivery_partner: str = ""
    status: ShipmentStatus = ShipmentStatus.PENDING
    tracking_url: str | None = None


@dataclass(frozen=True)
class OrderItemResult:
    id: str
    item_id: str | None
    item_name: str
    unit_price: int
    quantity: int
    line_total: int
    currency: str


@dataclass(frozen=True)
class ShipmentResult:
    """Shipment read-model."""

    id: str
    order_id: str
    awb_number: str
    delivery_partner: str
    status: ShipmentStatus
    tracking_url: str | None
    last_updated_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class OrderResult:
    """Order read-model. total is the sum of line totals."""

    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    currency: str
    source: OrderSource
    status: OrderStatus
    delivery_date: datetime | None
    total: int
    created_at: datetime
    updated_at: datetime
    items: tuple[OrderItemResult, ...] = field(default_factory=tuple)
    shipment: ShipmentResult | None = None


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


def shipment_to_dict(s: ShipmentResult) -> dict[str, Any]:
    return {
        "id": s.id,
        "order_id": s.order_id,
        "awb_number": s.awb_number,
        "delivery_partner": s.delivery_partner,
        "status": s.status.value,
        "tracking_url": s.tracking_url,
        "last_updated_at": s.last_updated_at.isoformat(),
        "created_at": s.created_at.isoformat(),
    }


def shipment_from_dict(data: dict[str, Any]) -> ShipmentResult:
    return ShipmentResult(
        id=data["id"],
        order_id=data["order_id"],
        awb_number=data["awb_number"],
        delivery_partner=data["delivery_partner"],
        status=ShipmentStatus(data["status"]),
        tracking_url=data["tracking_url"],
        last_updated_at=datetime.fromisoformat(data["last_updated_at"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def order_to_dict(order: OrderResult) -> dict[str, Any]:
    """Serialize an OrderResult for the cache."""
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "customer_address": order.customer_address,
        "currency": order.currency,
        "source": order.source.value,
        "status": order.status.value,
        "delivery_date": _iso(order.delivery_date),
        "total": order.total,
        "created_at": order.created_at.isoformat(),
        "updated_at": order.updated_at.isoformat(),
        "items": [
            {
                "id": line.id,
                "item_id": line.item_id,
                "item_name": line.item_name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "line_total": line.line_total,
                "currency": line.currency,
            }
            for line in order.items
        ],
        "shipment": shipment_to_dict(order.shipment) if order.shipment else None,
    }


def order_from_dict(data: dict[str, Any]) -> OrderResult:
    """Build an OrderResult from a cached dict; deserializes enums and datetimes."""
    return OrderResult(
        id=data["id"],
        order_number=data["order_number"],
        customer_name=data["customer_name"],
        customer_email=data["customer_email"],
        customer_phone=data["customer_phone"],
        customer_address=data["customer_address"],
        currency=data["currency"],
        source=OrderSource(data["source"]),
        status=OrderStatus(data["status"]),
        delivery_date=_from_iso(data["delivery_date"]),
        total=int(data["total"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
        items=tuple(OrderItemResult(**line) for line in data["items"]),
        shipment=shipment_from_dict(data["shipment"]) if data["shipment"] else None,
    )
