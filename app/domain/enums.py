"""Domain enumerations for the catalog and order backend.

Enums represent fixed sets of domain values (order source, order status,
shipment status). Values are stored as strings in the database.
"""

from enum import Enum


class OrderSource(str, Enum):
    """Channel through which an order was placed."""

    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    CALL = "call"
    OFFLINE = "offline"
    WEBSITE = "website"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid source values as strings."""
        return [source.value for source in cls]


class OrderStatus(str, Enum):
    """Order lifecycle status.

    New orders start at PENDING_CONFIRMATION. Creating a shipment moves the
    order to SHIPPED; a delivered shipment moves it to DELIVERED.
    """

    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for CHECK constraints).
        """
        return [status.value for status in cls]


class ShipmentStatus(str, Enum):
    """Carrier-reported shipment status."""

    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    FAILED = "failed"
    RETURNED = "returned"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid shipment status values as strings."""
        return [status.value for status in cls]
