"""Base repository: generic get/create/update over one ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update and commit.

    Repositories only speak SQL; caching and concurrency limits are applied
    by the application services that call them.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it refreshed (server defaults loaded)."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and return it refreshed."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def commit(self) -> None:
        """Commit the session's transaction.

        Services call this before invalidating cache entries, so a reader that
        misses afterwards can only load committed state.
        """
        await self.db.commit()
