"""Catalog item service: cached reads, validated writes, cache invalidation.

Reads go cache -> database (under the per-resource admission limiter) ->
cache. Every write commits first and then invalidates the item's own key
and all cached listing pages. A reader that misses after the invalidation
can only load committed state, so no listing older than the last write is
cached again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from app.application.dtos.item import (
    DesignVariantResult,
    ImageUpload,
    ItemResult,
    item_from_dict,
    item_to_dict,
)
from app.application.interfaces.services import (
    IBlobStorageService,
    ICacheService,
    IConcurrencyLimiter,
)
from app.application.services.catalog_validators import (
    validate_currency,
    validate_image,
    validate_name,
    validate_paging,
    validate_price,
)
from app.core.constants import MUTEX_ITEMS_READ
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.cache.keys import item_key, items_list_key, items_list_pattern
from app.infrastructure.persistence.models.item import DesignVariant, Item
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.infrastructure.persistence.repositories.item_repo import ItemRepository

logger = logging.getLogger(__name__)


def _variant_to_result(v: DesignVariant) -> DesignVariantResult:
    return DesignVariantResult(
        id=v.id,
        name=v.name,
        image_url=v.image_url,
        created_at=v.created_at,
        updated_at=v.updated_at,
    )


def item_to_result(item: Item) -> ItemResult:
    """Map ORM Item (with loaded variants) to application ItemResult."""
    return ItemResult(
        id=item.id,
        name=item.name,
        price=item.price,
        currency=item.currency,
        is_deleted=item.is_deleted,
        design_variants=tuple(_variant_to_result(v) for v in item.design_variants),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class ItemService:
    """Item and design variant use cases."""

    def __init__(
        self,
        item_repo: ItemRepository,
        cache: ICacheService,
        limiter: IConcurrencyLimiter,
        blob_storage: IBlobStorageService,
        *,
        cache_ttl: int = 600,
    ) -> None:
        self.item_repo = item_repo
        self.cache = cache
        self.limiter = limiter
        self.blob_storage = blob_storage
        self.cache_ttl = cache_ttl

    async def list_items(
        self, page: int = 1, page_size: int = 20, include_deleted: bool = False
    ) -> list[ItemResult]:
        """Return one page of items, newest first."""
        validate_paging(page, page_size)
        key = items_list_key(page, page_size, include_deleted)
        cached = await self._cached(key, lambda v: [item_from_dict(d) for d in v])
        if cached is not None:
            return cached

        async def load() -> list[Item]:
            return await self.item_repo.list_items(
                page, page_size, include_deleted=include_deleted
            )

        items = await self.limiter.run_exclusive(MUTEX_ITEMS_READ, load)
        results = [item_to_result(i) for i in items]
        await self.cache.set(key, [item_to_dict(r) for r in results], ttl=self.cache_ttl)
        return results

    async def get_item(self, item_id: str) -> ItemResult:
        """Return one item (soft-deleted items included).

        Raises:
            ResourceNotFoundException: If the item does not exist.
        """
        key = item_key(item_id)
        cached = await self._cached(key, item_from_dict)
        if cached is not None:
            return cached

        async def load() -> Item | None:
            return await self.item_repo.get_by_id(item_id)

        item = await self.limiter.run_exclusive(key, load)
        if item is None:
            raise ResourceNotFoundException("item", item_id)
        result = item_to_result(item)
        await self.cache.set(key, item_to_dict(result), ttl=self.cache_ttl)
        return result

    async def create_item(self, name: str, price: int, currency: str) -> ItemResult:
        """Create an item. Price in minor units."""
        item = Item(
            name=validate_name(name),
            price=validate_price(price),
            currency=validate_currency(currency),
            is_deleted=False,
            design_variants=[],
        )
        created = await self.item_repo.create(item)
        await self.item_repo.commit()
        await self.cache.remove_by_pattern(items_list_pattern())
        logger.info("Created item %s", created.id)
        return item_to_result(created)

    async def update_item(
        self, item_id: str, name: str, price: int, currency: str
    ) -> ItemResult:
        """Replace name, price and currency of an item."""
        item = await self._require_item(item_id)
        item.name = validate_name(name)
        item.price = validate_price(price)
        item.currency = validate_currency(currency)
        item.updated_at = utc_now()
        updated = await self.item_repo.update(item)
        await self._commit_and_invalidate(item_id)
        return item_to_result(updated)

    async def delete_item(self, item_id: str) -> None:
        """Soft delete: the item stays readable by id and in include_deleted listings."""
        item = await self._require_item(item_id)
        now = utc_now()
        item.is_deleted = True
        item.deleted_at = now
        item.updated_at = now
        await self.item_repo.update(item)
        await self._commit_and_invalidate(item_id)
        logger.info("Soft-deleted item %s", item_id)

    async def restore_item(self, item_id: str) -> None:
        item = await self._require_item(item_id)
        item.is_deleted = False
        item.deleted_at = None
        item.updated_at = utc_now()
        await self.item_repo.update(item)
        await self._commit_and_invalidate(item_id)
        logger.info("Restored item %s", item_id)

    async def add_design_variant(
        self, item_id: str, name: str, image: ImageUpload
    ) -> DesignVariantResult:
        """Upload an image and attach it to the item as a named variant.

        Raises:
            ValidationException: Empty, oversized or non-image upload, or bad name.
            ResourceNotFoundException: If the item does not exist.
        """
        variant_name = validate_name(name)
        validate_image(image.data, image.content_type)
        item = await self._require_item(item_id)

        image_url = await self.blob_storage.upload_image(
            image.data, image.file_name, image.content_type
        )
        variant = await self.item_repo.add_variant(
            DesignVariant(
                item_id=item_id,
                name=variant_name,
                image_url=image_url,
                blob_name=image_url.rsplit("/", 1)[-1],
            )
        )
        item.updated_at = utc_now()
        await self.item_repo.update(item)
        await self._commit_and_invalidate(item_id)
        return _variant_to_result(variant)

    async def delete_design_variant(self, item_id: str, variant_id: str) -> None:
        """Delete a variant of item_id and its blob (when a blob name is recorded)."""
        variant = await self.item_repo.get_variant(item_id, variant_id)
        if variant is None:
            raise ResourceNotFoundException("design_variant", variant_id)
        if variant.blob_name:
            await self.blob_storage.delete_image(variant.blob_name)
        await self.item_repo.delete_variant(variant)
        item = await self.item_repo.get_by_id(item_id)
        if item is not None:
            item.updated_at = utc_now()
            await self.item_repo.update(item)
        await self._commit_and_invalidate(item_id)

    async def _require_item(self, item_id: str) -> Item:
        item = await self.item_repo.get_by_id(item_id)
        if item is None:
            raise ResourceNotFoundException("item", item_id)
        return item

    async def _commit_and_invalidate(self, item_id: str) -> None:
        """Commit the write, then drop the item entry and every listing page."""
        await self.item_repo.commit()
        await self.cache.remove(item_key(item_id))
        await self.cache.remove_by_pattern(items_list_pattern())

    async def _cached(self, key: str, decode: Callable[[Any], Any]) -> Any:
        """Return the decoded cached value, or None on miss or undecodable entry."""
        lookup = await self.cache.get(key)
        if not lookup.found:
            return None
        try:
            return decode(lookup.value)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed cache entry %s", key, exc_info=True)
            return None
