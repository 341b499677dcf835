"""
Task Client View: сборка отображаемого списка задач.

Намеренно неэффективно (N+1):
1. GET /tasks с текущими фильтрами -> N строк (id, title, due_date)
2. N параллельных GET /tasks/{id} без ограничения параллелизма
3. Отображаемый список целиком заменяется результатом

После каждой мутации (create/update/delete/toggle) список загружается заново,
без оптимистичных локальных изменений.

Известный риск: два одновременных refresh() не синхронизированы,
и более старый результат может перезаписать более свежий.
"""

import asyncio
import enum
import time
from datetime import date

from ..core.logging import get_logger
from ..models import TaskStatus
from .api import TaskApiClient, task_payload
from .models import TaskDetail

logger = get_logger(__name__)


class FetchMode(str, enum.Enum):
    """Как собирать список задач."""

    N_PLUS_ONE = "n_plus_one"  # 1 запрос списка + N запросов деталей
    BATCHED = "batched"  # один GET /tasks/full, для сравнения


def parse_tags(text: str) -> list[str]:
    """
    Строка "work, urgent" из поля ввода -> ["work", "urgent"].

    Пробелы обрезаются, пустые элементы выбрасываются.
    """
    return [part.strip() for part in text.split(",") if part.strip()]


def _as_tag_list(tags: list[str] | str | None) -> list[str] | None:
    # None уходит как отсутствующий ключ: PUT без tags теги не трогает
    if tags is None:
        return None
    if isinstance(tags, str):
        return parse_tags(tags)
    return list(tags)


class TaskClientView:
    """
    Состояние клиентского списка задач и операции над ним.

    Атрибуты:
        tasks: Отображаемые задачи (после последнего успешного refresh)
        loading: Идёт ли загрузка
        query, tag: Фильтры; применяются только при явном refresh()
        last_error: Последняя ошибка (для показа пользователю)
    """

    def __init__(self, api: TaskApiClient, mode: FetchMode = FetchMode.N_PLUS_ONE):
        self.api = api
        self.mode = mode
        self.tasks: list[TaskDetail] = []
        self.loading = False
        self.query = ""
        self.tag = ""
        self.last_error: Exception | None = None

    # ------------------------------------------------------------------
    # Fetch sequence
    # ------------------------------------------------------------------

    async def _fetch_n_plus_one(self, q: str | None, tag: str | None) -> list[TaskDetail]:
        summaries = await self.api.list_tasks(q=q, tag=tag)
        logger.info(
            "Matched tasks, fetching details one by one",
            extra={"count": len(summaries), "q": q, "tag": tag},
        )
        # Без ограничения параллелизма и без отмены: это и демонстрируется
        return list(await asyncio.gather(*(self.api.get_task(s.id) for s in summaries)))

    async def _fetch_batched(self, q: str | None, tag: str | None) -> list[TaskDetail]:
        tasks = await self.api.list_tasks_full(q=q, tag=tag)
        logger.info("Matched tasks in one request", extra={"count": len(tasks), "q": q, "tag": tag})
        return tasks

    async def _run_sequence(self, q: str | None, tag: str | None) -> list[TaskDetail]:
        self.loading = True
        started = time.perf_counter()
        requests_before = self.api.request_count
        try:
            if self.mode is FetchMode.BATCHED:
                tasks = await self._fetch_batched(q, tag)
            else:
                tasks = await self._fetch_n_plus_one(q, tag)
        except Exception as e:
            # Частичных данных не показываем: прежний список остаётся
            self.last_error = e
            logger.error("Refresh sequence failed", extra={"error": str(e)})
            raise
        finally:
            self.loading = False

        self.tasks = tasks
        self.last_error = None
        logger.info(
            "Refresh sequence completed",
            extra={
                "mode": self.mode.value,
                "tasks": len(tasks),
                "requests": self.api.request_count - requests_before,
                "duration_ms": int((time.perf_counter() - started) * 1000),
            },
        )
        return tasks

    async def load(self) -> list[TaskDetail]:
        """Первая загрузка при старте: всегда без фильтров."""
        return await self._run_sequence(q=None, tag=None)

    async def refresh(self) -> list[TaskDetail]:
        """Загрузить список заново с текущими фильтрами query/tag."""
        return await self._run_sequence(q=self.query or None, tag=self.tag or None)

    def clear_filters(self) -> None:
        """Сбросить фильтры. Список обновится при следующем refresh()."""
        self.query = ""
        self.tag = ""

    # ------------------------------------------------------------------
    # Mutations (каждая заканчивается полным refresh)
    # ------------------------------------------------------------------

    @staticmethod
    def _require_title(title: str) -> None:
        if not title or not title.strip():
            raise ValueError("Title required")

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        tags: list[str] | str | None = None,
        due_date: date | None = None,
        location: str | None = None,
    ) -> list[TaskDetail]:
        """
        Создать задачу и перезагрузить список.

        tags можно передать списком или строкой "work, urgent".

        Raises:
            ValueError: Пустое название (запрос не отправляется)
            TaskClientError: Ошибка сервера (список не меняется)
        """
        self._require_title(title)
        payload = task_payload(
            title,
            description=description,
            due_date=due_date,
            location=location,
            tags=_as_tag_list(tags),
        )
        await self.api.create_task(payload)
        return await self.refresh()

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
        tags: list[str] | str | None = None,
        due_date: date | None = None,
        location: str | None = None,
    ) -> list[TaskDetail]:
        """
        Полностью заменить задачу (PUT) и перезагрузить список.

        Сервер перезаписывает все поля, поэтому передавать нужно всё,
        включая текущий статус. tags=None оставляет теги задачи как есть,
        пустой список их отвязывает.
        """
        self._require_title(title)
        payload = task_payload(
            title,
            description=description,
            due_date=due_date,
            location=location,
            tags=_as_tag_list(tags),
            status=status.value,
        )
        await self.api.update_task(task_id, payload)
        return await self.refresh()

    async def toggle_status(self, task: TaskDetail) -> list[TaskDetail]:
        """
        pending <-> completed.

        Отдельного endpoint нет: отправляется вся задача со своими тегами
        и перевёрнутым статусом.
        """
        return await self.update_task(
            task.id,
            title=task.title,
            description=task.description,
            status=task.status.toggled(),
            tags=task.tag_names,
            due_date=task.due_date,
            location=task.location,
        )

    async def delete_task(self, task_id: int) -> list[TaskDetail]:
        """Удалить задачу и перезагрузить список."""
        await self.api.delete_task(task_id)
        return await self.refresh()
