"""Shipment ORM model (at most one per order)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.domain.enums import ShipmentStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.order import Order


class Shipment(CuidMixin, Base):
    """Carrier shipment for an order. Table: shipment."""

    __tablename__ = "shipment"

    order_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("order_header.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    awb_number: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    delivery_partner: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=ShipmentStatus.PENDING.value, index=True
    )
    tracking_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    order: Mapped[Order] = relationship(back_populates="shipment")

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in ShipmentStatus.values())),
            name="shipment_status_check",
        ),
    )
