"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    ensure_utc,
    format_order_number,
    generate_cuid,
    utc_day_stamp,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "format_order_number",
    "utc_now",
    "ensure_utc",
    "utc_day_stamp",
]
