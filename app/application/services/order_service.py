"""Order service: order creation with generated order numbers, cached reads.

Order creation validates every line against the catalog (exists, not
deleted, same currency as the order), snapshots name and unit price, and
only then asks the generator for an order number, so a rejected order never
consumes a number. Writes are committed before the cached order and
order listings are invalidated.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from app.application.dtos.order import (
    OrderCreate,
    OrderItemResult,
    OrderResult,
    ShipmentResult,
    order_from_dict,
    order_to_dict,
)
from app.application.interfaces.services import (
    ICacheService,
    IConcurrencyLimiter,
    IOrderNumberGenerator,
)
from app.application.services.catalog_validators import (
    validate_currency,
    validate_name,
    validate_paging,
)
from app.core.constants import MUTEX_ORDERS_READ
from app.domain.enums import OrderSource, OrderStatus, ShipmentStatus
from app.domain.exceptions import (
    CurrencyMismatchException,
    ItemDeletedException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache.keys import order_key, orders_list_pattern
from app.infrastructure.persistence.models.order import Order, OrderItem
from app.infrastructure.persistence.models.shipment import Shipment
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.infrastructure.persistence.repositories.item_repo import ItemRepository
    from app.infrastructure.persistence.repositories.order_repo import OrderRepository

logger = logging.getLogger(__name__)


def shipment_to_result(s: Shipment) -> ShipmentResult:
    """Map ORM Shipment to application ShipmentResult."""
    return ShipmentResult(
        id=s.id,
        order_id=s.order_id,
        awb_number=s.awb_number,
        delivery_partner=s.delivery_partner,
        status=ShipmentStatus(s.status),
        tracking_url=s.tracking_url,
        last_updated_at=s.last_updated_at,
        created_at=s.created_at,
    )


def order_to_result(order: Order) -> OrderResult:
    """Map ORM Order (with loaded lines and shipment) to application OrderResult."""
    lines = tuple(
        OrderItemResult(
            id=line.id,
            item_id=line.item_id,
            item_name=line.item_name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            line_total=line.line_total,
            currency=line.currency,
        )
        for line in order.items
    )
    return OrderResult(
        id=order.id,
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        customer_address=order.customer_address,
        currency=order.currency,
        source=OrderSource(order.source),
        status=OrderStatus(order.status),
        delivery_date=order.delivery_date,
        total=sum(line.line_total for line in lines),
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=lines,
        shipment=shipment_to_result(order.shipment) if order.shipment else None,
    )


class OrderService:
    """Order use cases: list, get, create, update status."""

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        cache: ICacheService,
        limiter: IConcurrencyLimiter,
        order_numbers: IOrderNumberGenerator,
        *,
        cache_ttl: int = 300,
    ) -> None:
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.cache = cache
        self.limiter = limiter
        self.order_numbers = order_numbers
        self.cache_ttl = cache_ttl

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
    ) -> list[OrderResult]:
        """Return one page of orders matching the filters, newest first. Not cached."""
        validate_paging(page, page_size)

        async def load() -> list[Order]:
            return await self.order_repo.list_orders(
                page,
                page_size,
                status=status,
                source=source,
                customer_name=customer_name,
                start_date=start_date,
                end_date=end_date,
            )

        orders = await self.limiter.run_exclusive(MUTEX_ORDERS_READ, load)
        return [order_to_result(o) for o in orders]

    async def get_order(self, order_id: str) -> OrderResult:
        """Return one order, from cache if available.

        Raises:
            ResourceNotFoundException: If the order does not exist.
        """
        key = order_key(order_id)
        lookup = await self.cache.get(key)
        if lookup.found:
            try:
                return order_from_dict(lookup.value)
            except (KeyError, TypeError, ValueError):
                logger.warning("Discarding malformed cache entry %s", key, exc_info=True)
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundException("order", order_id)
        result = order_to_result(order)
        await self.cache.set(key, order_to_dict(result), ttl=self.cache_ttl)
        return result

    async def create_order(self, data: OrderCreate) -> OrderResult:
        """Validate lines, generate the order number and persist the order.

        Raises:
            ValidationException: Bad customer name, currency, empty order or quantity.
            ResourceNotFoundException: A referenced item does not exist.
            ItemDeletedException: A referenced item is soft-deleted.
            CurrencyMismatchException: An item's currency differs from the order's.
            SequenceGenerationError: The order number could not be generated.
            DuplicateOrderNumberException: The unique constraint rejected the number.
        """
        customer_name = validate_name(data.customer_name, field="customer_name")
        currency = validate_currency(data.currency)
        if not data.items:
            raise ValidationException("Order must contain at least one item", field="items")
        logger.info("Creating new order for customer: %s", customer_name)

        lines: list[OrderItem] = []
        for requested in data.items:
            if requested.quantity < 1:
                raise ValidationException("Quantity must be at least 1", field="quantity")
            item = await self.item_repo.get_by_id(requested.item_id)
            if item is None:
                raise ResourceNotFoundException("item", requested.item_id)
            if item.is_deleted:
                raise ItemDeletedException(item.id)
            if item.currency != currency:
                raise CurrencyMismatchException(item.id, item.currency, currency)
            lines.append(
                OrderItem(
                    item_id=item.id,
                    item_name=item.name,
                    unit_price=item.price,
                    quantity=requested.quantity,
                    line_total=item.price * requested.quantity,
                    currency=item.currency,
                )
            )

        order_number = await self.order_numbers.next()
        order = Order(
            order_number=order_number,
            customer_name=customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            customer_address=data.customer_address,
            currency=currency,
            source=data.source.value,
            status=OrderStatus.PENDING_CONFIRMATION.value,
            delivery_date=data.delivery_date,
            items=lines,
        )
        created = await self.order_repo.create_order(order)
        await self.order_repo.commit()
        await self.cache.remove_by_pattern(orders_list_pattern())
        logger.info("Created order %s (%s)", created.order_number, created.id)
        return order_to_result(created)

    async def update_status(self, order_id: str, status: OrderStatus) -> OrderResult:
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundException("order", order_id)
        order.status = status.value
        order.updated_at = utc_now()
        updated = await self.order_repo.update(order)
        await self.order_repo.commit()
        await invalidate_order(self.cache, order_id)
        return order_to_result(updated)


async def invalidate_order(cache: ICacheService, order_id: str) -> None:
    """Drop the cached order and every cached order listing."""
    await cache.remove(order_key(order_id))
    await cache.remove_by_pattern(orders_list_pattern())
