"""Order repository, including the max-order-number lookup used by the generator."""

from datetime import datetime

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import OrderSource, OrderStatus
from app.domain.exceptions import DuplicateOrderNumberException
from app.infrastructure.persistence.models.order import Order
from app.infrastructure.persistence.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Order repository. Lines and shipment load eagerly with the order (selectin)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Order)

    async def get_max_order_number(self, prefix: str) -> str | None:
        """Return the highest order number starting with prefix, or None.

        Ordered by length first so PREFIX-D-10000 ranks above PREFIX-D-9999;
        within one length, string order equals numeric order. Uses the
        unique index on order_number for the prefix range scan.
        """
        result = await self.db.execute(
            select(Order.order_number)
            .where(Order.order_number.startswith(prefix, autoescape=True))
            .order_by(desc(func.length(Order.order_number)), desc(Order.order_number))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_order(self, order: Order) -> Order:
        """Persist a new order with its lines.

        Raises DuplicateOrderNumberException on unique constraint violation.
        """
        try:
            return await self.create(order)
        except IntegrityError:
            raise DuplicateOrderNumberException(order.order_number)

    async def list_orders(
        self,
        page: int = 1,
        page_size: int = 20,
        *,
        status: OrderStatus | None = None,
        source: OrderSource | None = None,
        customer_name: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Order]:
        """Return one page of orders matching the filters, newest first.

        customer_name matches as a substring; dates bound created_at inclusively.
        """
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status.value)
        if source is not None:
            stmt = stmt.where(Order.source == source.value)
        if customer_name:
            stmt = stmt.where(Order.customer_name.contains(customer_name, autoescape=True))
        if start_date is not None:
            stmt = stmt.where(Order.created_at >= start_date)
        if end_date is not None:
            stmt = stmt.where(Order.created_at <= end_date)
        stmt = (
            stmt.order_by(desc(Order.created_at), desc(Order.id))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
