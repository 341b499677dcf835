"""Task service with business logic."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Task, TaskStatus
from ..models.base import utc_now
from ..repositories import TagRepository, TaskRepository

logger = get_logger(__name__)


class TaskNotFoundError(ValueError):
    """Задача с указанным id не существует."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")


def normalize_tag_names(tag_names: list[str] | None) -> list[str]:
    """
    Подготовить список тегов к привязке.

    Пробелы по краям обрезаются, пустые имена выбрасываются,
    дубликаты схлопываются с сохранением порядка первого появления.

    Пример:
        normalize_tag_names(["work", " urgent ", "work", ""]) -> ["work", "urgent"]
    """
    if not tag_names:
        return []
    stripped = (name.strip() for name in tag_names)
    return list(dict.fromkeys(name for name in stripped if name))


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TaskService:
    """
    Сервис для работы с задачами.

    Координирует TaskRepository и TagRepository:
    - валидация названия
    - find-or-create тегов
    - полная замена набора тегов при обновлении ("clear then add")
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.tag_repo = TagRepository(db)

    @staticmethod
    def _validate_title(title: str | None) -> str:
        if not title or not title.strip():
            raise ValueError("Task title cannot be empty")
        return title.strip()

    async def _attach_tags(self, task_id: int, tag_names: list[str]) -> None:
        for name in tag_names:
            tag = await self.tag_repo.get_or_create(name)
            await self.task_repo.add_tag(task_id, tag)

    async def list_tasks(self, q: str | None = None, tag: str | None = None) -> list:
        """
        Облегчённый список задач (id, title, due_date) с фильтрами.

        Args:
            q: Подстрока для поиска в title/description/location
            tag: Точное имя тега

        Returns:
            Строки (id, title, due_date), отсортированные по due_date
        """
        rows = await self.task_repo.list_summaries(q=q or None, tag=tag or None)
        logger.debug("Tasks listed", extra={"q": q, "tag": tag, "count": len(rows)})
        return rows

    async def list_tasks_full(self, q: str | None = None, tag: str | None = None) -> list[Task]:
        """Полные задачи с тегами одним запросом (режим сравнения с N+1)."""
        tasks = await self.task_repo.list_full(q=q or None, tag=tag or None)
        logger.debug("Tasks listed with details", extra={"q": q, "tag": tag, "count": len(tasks)})
        return tasks

    async def get_task(self, task_id: int) -> Task:
        """
        Получить задачу со всеми полями и тегами.

        Raises:
            TaskNotFoundError: Если задача не найдена
        """
        task = await self.task_repo.get_by_id_full(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        due_date: date | None = None,
        location: str | None = None,
        tag_names: list[str] | None = None,
    ) -> Task:
        """
        Создать задачу и привязать к ней теги.

        Бизнес-правила:
        1. Название обязательно (до записи в БД)
        2. Статус новой задачи всегда pending
        3. Теги ищутся по имени или создаются, дубликаты схлопываются

        Raises:
            ValueError: Если название пустое
        """
        title = self._validate_title(title)

        task = await self.task_repo.create(
            Task(
                title=title,
                description=_clean_text(description),
                due_date=due_date,
                location=_clean_text(location),
                status=TaskStatus.PENDING,
            )
        )

        names = normalize_tag_names(tag_names)
        await self._attach_tags(task.id, names)
        await self.db.flush()

        logger.info("Task created", extra={"task_id": task.id, "tags": names})
        return task

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
        due_date: date | None = None,
        location: str | None = None,
        tag_names: list[str] | None = None,
    ) -> Task:
        """
        Полностью заменить задачу.

        Все изменяемые поля перезаписываются переданными значениями
        (None тоже записывается). Теги:
        - tag_names is None: набор тегов не трогаем
        - иначе: сначала отвязываем все теги, затем привязываем каждый из списка

        Вся последовательность выполняется в транзакции запроса,
        поэтому задача не остаётся без тегов при ошибке посередине.

        Raises:
            TaskNotFoundError: Если задача не найдена
            ValueError: Если название пустое
        """
        if not await self.task_repo.exists(task_id):
            raise TaskNotFoundError(task_id)

        title = self._validate_title(title)

        task = await self.task_repo.update(
            task_id,
            title=title,
            description=_clean_text(description),
            status=status,
            due_date=due_date,
            location=_clean_text(location),
            # onupdate не сработает, если меняются только теги
            updated_at=utc_now(),
        )

        if tag_names is not None:
            names = normalize_tag_names(tag_names)
            await self.task_repo.clear_tags(task_id)
            await self._attach_tags(task_id, names)
            logger.debug("Task tags replaced", extra={"task_id": task_id, "tags": names})

        await self.db.flush()

        logger.info("Task updated", extra={"task_id": task_id, "status": status.value})
        return task

    async def delete_task(self, task_id: int) -> None:
        """
        Удалить задачу. Теги остаются в БД, даже если больше не используются.

        Raises:
            TaskNotFoundError: Если строк не затронуто
        """
        deleted = await self.task_repo.delete(task_id)
        if not deleted:
            raise TaskNotFoundError(task_id)

        await self.db.flush()
        logger.info("Task deleted", extra={"task_id": task_id})
