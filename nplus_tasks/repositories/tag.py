"""Теги: поиск по имени и ленивое создание."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Tag
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Репозиторий тегов. Тег идентифицируется по имени (точное совпадение)."""

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        result = await self.db.execute(select(Tag).filter_by(name=name))
        return result.scalar_one_or_none()

    async def get_or_create(self, name: str) -> Tag:
        """
        find-or-create по имени.

        Теги создаются при первом упоминании и никогда не удаляются,
        даже когда у них не остаётся задач.
        """
        existing = await self.get_by_name(name)
        if existing is not None:
            return existing
        return await self.create(Tag(name=name))
