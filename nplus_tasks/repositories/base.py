"""Generic repository over a model with an integer primary key `id`."""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Общие операции для задач и тегов.

    Репозиторий делает только flush: транзакцией владеет сессия запроса
    (Database.session / dependency get_db), она и решает commit или rollback.
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    def _id_clause(self, id: int) -> ColumnElement[bool]:
        return self.model.id == id

    async def create(self, obj: ModelType) -> ModelType:
        """INSERT + flush; после refresh у объекта есть id и created_at."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def get_by_id(self, id: int) -> ModelType | None:
        result = await self.db.execute(select(self.model).where(self._id_clause(id)))
        return result.scalar_one_or_none()

    async def exists(self, id: int) -> bool:
        """SELECT EXISTS(... WHERE id = {id}) без загрузки строки."""
        result = await self.db.execute(select(exists().where(self._id_clause(id))))
        return bool(result.scalar())

    async def update(self, id: int, **fields: Any) -> ModelType | None:
        """
        Записать поля объекта как есть, включая None (замена, а не patch).

        Неизвестные имена полей игнорируются. None, если строки нет.
        """
        obj = await self.get_by_id(id)
        if obj is None:
            return None

        for name, value in fields.items():
            if hasattr(obj, name):
                setattr(obj, name, value)

        await self.db.flush()
        # onupdate для updated_at выставляется в SQL, перечитываем
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: int) -> bool:
        """DELETE по id. False, если ни одна строка не затронута."""
        result = await self.db.execute(delete(self.model).where(self._id_clause(id)))
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
