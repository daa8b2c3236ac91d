"""Sequence generation: day-scoped order numbers."""

from app.infrastructure.sequence.order_number_generator import (
    OrderNumberGenerator,
    OrderNumberSource,
    SessionOrderNumberSource,
)

__all__ = ["OrderNumberGenerator", "OrderNumberSource", "SessionOrderNumberSource"]
