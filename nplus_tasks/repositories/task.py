"""Task repository: list/detail queries, filters and tag association."""

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Tag, Task, task_tags
from .base import BaseRepository

# Поля, по которым ищет параметр q
SEARCH_FIELDS = (Task.title, Task.description, Task.location)

# Порядок списка: по возрастанию due_date, задачи без даты в конце, затем по id.
# "due_date IS NULL" сортируется как 0/1, это работает и в SQLite, и в PostgreSQL.
LIST_ORDER = (Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())


class TaskRepository(BaseRepository[Task]):
    """
    Репозиторий для работы с задачами.

    Включает:
    - Фильтрацию списка (поиск по тексту + тег)
    - Загрузку задачи вместе с тегами
    - Управление связью задача-тег
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    @staticmethod
    def build_filters(q: str | None = None, tag: str | None = None) -> list:
        """
        Построить условия WHERE для списка задач.

        - q: подстрока в title OR description OR location (без учёта регистра,
          символы % и _ ищутся буквально)
        - tag: у задачи есть тег с точно таким именем

        Условия комбинируются через AND. Пустые значения игнорируются.
        """
        conditions = []

        if q:
            conditions.append(
                or_(*(field.icontains(q, autoescape=True) for field in SEARCH_FIELDS))
            )

        if tag:
            # EXISTS вместо JOIN: задача не дублируется в результате
            conditions.append(Task.tags.any(Tag.name == tag))

        return conditions

    async def list_summaries(self, q: str | None = None, tag: str | None = None) -> list:
        """
        Получить облегчённый список задач: только id, title, due_date.

        Описание, статус, место и теги намеренно не отдаются,
        клиент обязан запросить каждую задачу отдельно (N+1).

        SQL эквивалент:
            SELECT id, title, due_date FROM tasks
            WHERE (title ILIKE '%q%' OR description ILIKE '%q%' OR location ILIKE '%q%')
              AND EXISTS (SELECT 1 FROM task_tags JOIN tags ... WHERE tags.name = {tag})
            ORDER BY due_date IS NULL, due_date, id;

        Returns:
            Список строк (id, title, due_date)
        """
        query = select(Task.id, Task.title, Task.due_date)

        conditions = self.build_filters(q=q, tag=tag)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.db.execute(query.order_by(*LIST_ORDER))
        return list(result.all())

    async def list_full(self, q: str | None = None, tag: str | None = None) -> list[Task]:
        """
        Тот же фильтр и порядок, что у list_summaries, но полные задачи с тегами.

        Используется batched-режимом: два запроса к БД вместо 1 + N HTTP запросов.
        """
        query = select(Task).options(selectinload(Task.tags)).execution_options(
            populate_existing=True
        )

        conditions = self.build_filters(q=q, tag=tag)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.db.execute(query.order_by(*LIST_ORDER))
        return list(result.scalars().all())

    async def get_by_id_full(self, id: int) -> Task | None:
        """
        Получить задачу вместе с тегами (eager loading).

        Returns:
            Задача или None
        """
        result = await self.db.execute(
            select(Task)
            .options(selectinload(Task.tags))
            .where(self._id_clause(id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def clear_tags(self, task_id: int) -> Task | None:
        """
        Отвязать от задачи все теги. Сами теги остаются в БД.

        SQL эквивалент:
            DELETE FROM task_tags WHERE task_id = {task_id};
        """
        task = await self.get_by_id_full(task_id)
        if task is None:
            return None

        task.tags.clear()
        await self.db.flush()
        return task

    async def add_tag(self, task_id: int, tag: Tag) -> Task | None:
        """
        Привязать тег к задаче (повторная привязка игнорируется).
        """
        task = await self.get_by_id_full(task_id)
        if task is None:
            return None

        if tag not in task.tags:
            task.tags.append(tag)
            await self.db.flush()

        return task

    async def delete(self, id: int) -> bool:
        """
        Удалить задачу и её связи с тегами. Теги не удаляются.

        SQLite не проверяет внешние ключи без PRAGMA, поэтому связи
        удаляются явно: иначе задача с переиспользованным id получила бы чужие теги.
        """
        await self.db.execute(delete(task_tags).where(task_tags.c.task_id == id))
        return await super().delete(id)
