"""Cache key and mutex resource key builders. Single place for key format (DRY).

The first segment of every key is its tag; VersionedCache groups keys by
tag for pattern invalidation. Key components (ids) must not contain
CACHE_KEY_SEP to avoid ambiguous or colliding keys.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_ITEM,
    CACHE_PREFIX_ITEMS,
    CACHE_PREFIX_ORDER,
    CACHE_PREFIX_ORDERS,
    CACHE_WILDCARD,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def item_key(item_id: str) -> str:
    """Cache key for a single item by ID (also its mutex resource key)."""
    _validate_key_component(item_id, "item_id")
    return f"{CACHE_PREFIX_ITEM}{CACHE_KEY_SEP}{item_id}"


def items_list_key(page: int, page_size: int, include_deleted: bool) -> str:
    """Cache key for one page of the item listing."""
    return (
        f"{items_list_pattern().removesuffix(CACHE_WILDCARD)}{CACHE_KEY_SEP}"
        f"p{page}{CACHE_KEY_SEP}ps{page_size}{CACHE_KEY_SEP}del{include_deleted}"
    )


def items_list_pattern() -> str:
    """Invalidation pattern covering every cached item listing page."""
    return f"{CACHE_PREFIX_ITEMS}{CACHE_KEY_SEP}all{CACHE_WILDCARD}"


def order_key(order_id: str) -> str:
    """Cache key for a single order by ID."""
    _validate_key_component(order_id, "order_id")
    return f"{CACHE_PREFIX_ORDER}{CACHE_KEY_SEP}{order_id}"


def orders_list_pattern() -> str:
    """Invalidation pattern covering every cached order listing."""
    return f"{CACHE_PREFIX_ORDERS}{CACHE_KEY_SEP}all{CACHE_WILDCARD}"
