"""ItemService: read-through caching, invalidation on writes, validation."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.item import ImageUpload
from app.application.services.item_service import ItemService
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.cache.keys import item_key, items_list_key
from app.infrastructure.cache.lookup import CacheLookup
from app.infrastructure.concurrency.keyed_mutex import KeyedMutex
from app.infrastructure.persistence.models.item import DesignVariant, Item

NOW = datetime(2026, 1, 6, 12, 0, tzinfo=UTC)


def make_item(item_id: str = "itm1", **overrides) -> Item:
    fields = {
        "id": item_id,
        "name": "Mug",
        "price": 1200,
        "currency": "USD",
        "is_deleted": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Item(**fields)


@pytest.fixture
def item_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.update.side_effect = lambda item: item
    return repo


@pytest.fixture
def blob_storage() -> AsyncMock:
    storage = AsyncMock()
    storage.upload_image.return_value = "https://blobs.example/images/abc123.png"
    return storage


@pytest.fixture
def service(item_repo, cache, mutex, blob_storage) -> ItemService:
    return ItemService(item_repo, cache, mutex, blob_storage, cache_ttl=600)


@pytest.mark.asyncio
async def test_get_item_reads_through_cache(service, item_repo) -> None:
    item_repo.get_by_id.return_value = make_item()

    first = await service.get_item("itm1")
    second = await service.get_item("itm1")

    assert first == second
    assert first.name == "Mug"
    item_repo.get_by_id.assert_awaited_once_with("itm1")


@pytest.mark.asyncio
async def test_get_missing_item_raises_not_found(service, item_repo) -> None:
    item_repo.get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await service.get_item("nope")
    assert exc_info.value.details == {"resource_type": "item", "resource_id": "nope"}


@pytest.mark.asyncio
async def test_list_items_caches_page_and_empty_page(service, item_repo, cache) -> None:
    item_repo.list_items.return_value = []

    assert await service.list_items(1, 20) == []
    assert await service.list_items(1, 20) == []

    item_repo.list_items.assert_awaited_once_with(1, 20, include_deleted=False)
    assert (await cache.get(items_list_key(1, 20, False))).found


@pytest.mark.asyncio
async def test_update_invalidates_item_and_listings(service, item_repo, cache) -> None:
    item = make_item()
    item_repo.get_by_id.return_value = item
    item_repo.list_items.return_value = [item]
    await service.get_item("itm1")
    await service.list_items(1, 20)

    updated = await service.update_item("itm1", " Big Mug ", 1500, "USD")

    assert updated.name == "Big Mug"
    assert not (await cache.get(item_key("itm1"))).found
    assert not (await cache.get(items_list_key(1, 20, False))).found
    assert (await service.get_item("itm1")).price == 1500


@pytest.mark.asyncio
async def test_create_item_invalidates_listings(service, item_repo, cache) -> None:
    item_repo.list_items.return_value = []
    await service.list_items(1, 20)

    async def persist(item: Item) -> Item:
        item.id = "new1"
        item.created_at = item.updated_at = NOW
        return item

    item_repo.create.side_effect = persist
    created = await service.create_item("Plate", 800, "EUR")

    assert created.id == "new1"
    assert created.design_variants == ()
    assert not (await cache.get(items_list_key(1, 20, False))).found


@pytest.mark.parametrize(
    ("name", "price", "currency", "field"),
    [
        ("", 100, "USD", "name"),
        ("x" * 256, 100, "USD", "name"),
        ("Mug", -1, "USD", "price"),
        ("Mug", 100, "JPY", "currency"),
    ],
)
@pytest.mark.asyncio
async def test_create_item_validation(service, item_repo, name, price, currency, field) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.create_item(name, price, currency)
    assert exc_info.value.details == {"field": field}
    item_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_soft_delete_and_restore(service, item_repo) -> None:
    item = make_item()
    item_repo.get_by_id.return_value = item

    await service.delete_item("itm1")
    assert item.is_deleted is True
    assert item.deleted_at is not None
    assert (await service.get_item("itm1")).is_deleted is True

    await service.restore_item("itm1")
    assert item.is_deleted is False
    assert item.deleted_at is None
    assert (await service.get_item("itm1")).is_deleted is False


@pytest.mark.asyncio
async def test_list_items_rejects_bad_paging(service) -> None:
    with pytest.raises(ValidationException):
        await service.list_items(0, 20)
    with pytest.raises(ValidationException):
        await service.list_items(1, 101)


@pytest.mark.asyncio
async def test_add_design_variant_uploads_and_invalidates(
    service, item_repo, blob_storage, cache
) -> None:
    item_repo.get_by_id.return_value = make_item()
    await service.get_item("itm1")

    async def add_variant(variant: DesignVariant) -> DesignVariant:
        variant.id = "var1"
        variant.created_at = variant.updated_at = NOW
        return variant

    item_repo.add_variant.side_effect = add_variant
    image = ImageUpload(data=b"\x89PNG...", file_name="red.png", content_type="image/png")

    result = await service.add_design_variant("itm1", "Red", image)

    assert result.image_url == "https://blobs.example/images/abc123.png"
    blob_storage.upload_image.assert_awaited_once_with(b"\x89PNG...", "red.png", "image/png")
    stored = item_repo.add_variant.await_args.args[0]
    assert stored.blob_name == "abc123.png"
    assert not (await cache.get(item_key("itm1"))).found


@pytest.mark.parametrize(
    ("data", "content_type"),
    [(b"", "image/png"), (b"x" * (5 * 1024 * 1024 + 1), "image/png"), (b"%PDF", "application/pdf")],
)
@pytest.mark.asyncio
async def test_add_design_variant_rejects_bad_images(
    service, blob_storage, data, content_type
) -> None:
    with pytest.raises(ValidationException):
        await service.add_design_variant(
            "itm1", "Red", ImageUpload(data=data, file_name="f", content_type=content_type)
        )
    blob_storage.upload_image.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_design_variant(service, item_repo, blob_storage) -> None:
    variant = DesignVariant(id="var1", item_id="itm1", name="Red", image_url="u", blob_name="b.png")
    item_repo.get_variant.return_value = variant
    item_repo.get_by_id.return_value = make_item()

    await service.delete_design_variant("itm1", "var1")

    blob_storage.delete_image.assert_awaited_once_with("b.png")
    item_repo.delete_variant.assert_awaited_once_with(variant)


@pytest.mark.asyncio
async def test_delete_missing_design_variant(service, item_repo) -> None:
    item_repo.get_variant.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.delete_design_variant("itm1", "var404")


@pytest.mark.asyncio
async def test_cache_outage_falls_back_to_database(item_repo, mutex, blob_storage) -> None:
    broken_cache = AsyncMock()
    broken_cache.get.return_value = CacheLookup.miss()
    service = ItemService(item_repo, broken_cache, mutex, blob_storage)
    item_repo.get_by_id.return_value = make_item()

    assert (await service.get_item("itm1")).id == "itm1"


@pytest.mark.asyncio
async def test_burst_of_reads_limited_per_item(item_repo, cache, blob_storage) -> None:
    active = peak = 0

    async def slow_get(item_id: str) -> None:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return None

    item_repo.get_by_id.side_effect = slow_get
    service = ItemService(item_repo, cache, KeyedMutex(max_concurrent=2), blob_storage)

    results = await asyncio.gather(
        *(service.get_item("itm1") for _ in range(6)), return_exceptions=True
    )

    assert all(isinstance(r, ResourceNotFoundException) for r in results)
    assert peak == 2


@pytest.mark.asyncio
async def test_read_racing_an_uncommitted_update_is_not_left_cached(
    service, item_repo
) -> None:
    """A reader that loads the old row before commit cannot outlive the write."""
    committed = make_item(price=1200)
    written = make_item(price=1200)
    visible = {"row": committed}
    reads = {"count": 0}

    async def get_by_id(item_id: str) -> Item:
        reads["count"] += 1
        return written if reads["count"] == 1 else visible["row"]

    async def commit() -> None:
        stale = await service.get_item("itm1")
        assert stale.price == 1200
        visible["row"] = written

    item_repo.get_by_id.side_effect = get_by_id
    item_repo.commit.side_effect = commit

    await service.update_item("itm1", "Mug", 1500, "USD")

    assert (await service.get_item("itm1")).price == 1500


@pytest.mark.asyncio
async def test_create_item_commits_before_invalidating(service, item_repo, cache) -> None:
    item_repo.list_items.return_value = []
    await service.list_items(1, 20)

    async def persist(item: Item) -> Item:
        item.id = "new1"
        item.created_at = item.updated_at = NOW
        return item

    async def commit() -> None:
        assert (await cache.get(items_list_key(1, 20, False))).found

    item_repo.create.side_effect = persist
    item_repo.commit.side_effect = commit

    await service.create_item("Plate", 800, "EUR")

    item_repo.commit.assert_awaited_once()
    assert not (await cache.get(items_list_key(1, 20, False))).found
