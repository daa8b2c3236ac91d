"""DTOs for catalog item use cases (no dependency on ORM).

Results round-trip through the cache as plain dicts: *_to_dict emits
JSON-safe values (ISO datetimes), *_from_dict restores the dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DesignVariantResult:
    """Design variant read-model."""

    id: str
    name: str
    image_url: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ItemResult:
    """Item read-model (result of get_item, list_items, create_item). Price in minor units."""

    id: str
    name: str
    price: int
    currency: str
    is_deleted: bool
    design_variants: tuple[DesignVariantResult, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ImageUpload:
    """Image payload for a new design variant (bytes already read from the request)."""

    data: bytes
    file_name: str
    content_type: str


def variant_to_dict(v: DesignVariantResult) -> dict[str, Any]:
    return {
        "id": v.id,
        "name": v.name,
        "image_url": v.image_url,
        "created_at": v.created_at.isoformat(),
        "updated_at": v.updated_at.isoformat(),
    }


def variant_from_dict(data: dict[str, Any]) -> DesignVariantResult:
    return DesignVariantResult(
        id=data["id"],
        name=data["name"],
        image_url=data["image_url"],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def item_to_dict(item: ItemResult) -> dict[str, Any]:
    """Serialize an ItemResult for the cache."""
    return {
        "id": item.id,
        "name": item.name,
        "price": item.price,
        "currency": item.currency,
        "is_deleted": item.is_deleted,
        "design_variants": [variant_to_dict(v) for v in item.design_variants],
        "created_at": item.created_at.isoformat(),
        "updated_at": item.updated_at.isoformat(),
    }


def item_from_dict(data: dict[str, Any]) -> ItemResult:
    """Build an ItemResult from a cached dict; deserializes ISO datetime fields."""
    return ItemResult(
        id=data["id"],
        name=data["name"],
        price=int(data["price"]),
        currency=data["currency"],
        is_deleted=bool(data["is_deleted"]),
        design_variants=tuple(variant_from_dict(v) for v in data["design_variants"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )
