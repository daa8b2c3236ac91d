"""Order and OrderItem ORM models.

order_number is unique and indexed: the order number generator's
max-by-prefix lookup relies on the index, and the unique constraint is the
last line of defence against a duplicate number.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.enums import OrderSource, OrderStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.shipment import Shipment


def _in_check(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(column, ", ".join(f"'{v}'" for v in values))


class Order(CuidMixin, TimestampMixin, Base):
    """Customer order. Table: order_header (ORDER is reserved in SQL)."""

    __tablename__ = "order_header"

    order_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    customer_address: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    source: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=OrderStatus.PENDING_CONFIRMATION.value, index=True
    )
    delivery_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    items: Mapped[list[OrderItem]] = relationship(
        back_populates="order", cascade="all, delete-orphan", lazy="selectin"
    )
    shipment: Mapped[Shipment | None] = relationship(
        back_populates="order", cascade="all, delete-orphan", uselist=False, lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(_in_check("source", OrderSource.values()), name="order_source_check"),
        CheckConstraint(_in_check("status", OrderStatus.values()), name="order_status_check"),
    )


class OrderItem(CuidMixin, Base):
    """Order line. Name and unit price are snapshots taken at order time."""

    __tablename__ = "order_item"

    order_id: Mapped[str] = mapped_column(
        String, ForeignKey("order_header.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Nullable so the line survives removal of the catalog item.
    item_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("item.id", ondelete="SET NULL"), nullable=True, index=True
    )
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    line_total: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")

    __table_args__ = (CheckConstraint("quantity >= 1", name="order_item_quantity_positive"),)
