"""Input validation shared by the catalog and order services.

Raises ValidationException with the offending field name; services call
these before touching the database.
"""

from app.core.constants import (
    ALLOWED_CURRENCIES,
    ALLOWED_IMAGE_TYPES,
    MAX_IMAGE_SIZE,
    MAX_PAGE_SIZE,
)
from app.domain.exceptions import ValidationException

MAX_NAME_LENGTH = 255


def validate_paging(page: int, page_size: int) -> None:
    """page >= 1 and 1 <= page_size <= MAX_PAGE_SIZE."""
    if page < 1:
        raise ValidationException("page must be >= 1", field="page")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValidationException(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}", field="page_size"
        )


def validate_name(value: str, field: str = "name") -> str:
    """Return value stripped; must be 1..255 characters."""
    name = (value or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ValidationException(
            f"{field} must be between 1 and {MAX_NAME_LENGTH} characters", field=field
        )
    return name


def validate_currency(currency: str) -> str:
    if currency not in ALLOWED_CURRENCIES:
        raise ValidationException(
            f"Currency must be one of: {', '.join(ALLOWED_CURRENCIES)}", field="currency"
        )
    return currency


def validate_price(price: int) -> int:
    if price < 0:
        raise ValidationException("Price must be non-negative", field="price")
    return price


def validate_image(data: bytes, content_type: str) -> None:
    """Image must be non-empty, at most MAX_IMAGE_SIZE bytes and an allowed image type."""
    if not data:
        raise ValidationException("Image file is required", field="image")
    if len(data) > MAX_IMAGE_SIZE:
        raise ValidationException(
            f"File size exceeds maximum allowed size of {MAX_IMAGE_SIZE // (1024 * 1024)} MB",
            field="image",
        )
    if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise ValidationException("Only image files are allowed", field="image")
