"""Item and design variant repository."""

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.item import DesignVariant, Item
from app.infrastructure.persistence.repositories.base import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """Item repository. Variants load eagerly with their item (selectin)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Item)

    async def list_items(
        self, page: int = 1, page_size: int = 20, *, include_deleted: bool = False
    ) -> list[Item]:
        """Return one page of items, newest first. Soft-deleted items excluded by default."""
        stmt = select(Item)
        if not include_deleted:
            stmt = stmt.where(Item.is_deleted.is_(False))
        stmt = (
            stmt.order_by(desc(Item.created_at), desc(Item.id))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_variant(self, item_id: str, variant_id: str) -> DesignVariant | None:
        """Return the variant only if it belongs to item_id."""
        result = await self.db.execute(
            select(DesignVariant).where(
                DesignVariant.id == variant_id, DesignVariant.item_id == item_id
            )
        )
        return result.scalar_one_or_none()

    async def add_variant(self, variant: DesignVariant) -> DesignVariant:
        self.db.add(variant)
        await self.db.flush()
        await self.db.refresh(variant)
        return variant

    async def delete_variant(self, variant: DesignVariant) -> None:
        await self.db.delete(variant)
        await self.db.flush()
