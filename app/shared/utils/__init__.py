"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import ensure_utc, utc_day_stamp, utc_now
from app.shared.utils.generators import (
    format_order_number,
    generate_cuid,
    order_number_day_prefix,
    parse_order_sequence,
)

__all__ = [
    "generate_cuid",
    "format_order_number",
    "order_number_day_prefix",
    "parse_order_sequence",
    "utc_now",
    "ensure_utc",
    "utc_day_stamp",
]
