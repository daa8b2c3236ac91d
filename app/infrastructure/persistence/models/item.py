"""Item (catalog product) and DesignVariant (item image variant) ORM models."""

from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import ALLOWED_CURRENCIES
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Item(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Catalog item. Price in minor units (cents). Soft-deleted, never hard-deleted."""

    __tablename__ = "item"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    design_variants: Mapped[list[DesignVariant]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="DesignVariant.created_at",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="item_price_non_negative"),
        CheckConstraint(
            "currency IN ({})".format(", ".join(f"'{c}'" for c in ALLOWED_CURRENCIES)),
            name="item_currency_check",
        ),
    )


class DesignVariant(CuidMixin, TimestampMixin, Base):
    """Named image variant of an item. blob_name is kept to delete the blob later."""

    __tablename__ = "design_variant"

    item_id: Mapped[str] = mapped_column(
        String, ForeignKey("item.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    blob_name: Mapped[str | None] = mapped_column(String(500), nullable=True)

    item: Mapped[Item] = relationship(back_populates="design_variants")
