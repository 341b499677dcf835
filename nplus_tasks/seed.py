"""
Фиксированный демо-набор задач.

Загружается после полного сброса БД при каждом старте приложения
(SEED_ON_STARTUP=true), поэтому между перезапусками ничего не сохраняется.
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from .core.logging import get_logger
from .models import TaskStatus
from .services import TaskService

logger = get_logger(__name__)

# Статусы чередуются: чётные (0, 2, 4) completed, нечётные pending
SEED_TASKS: list[dict] = [
    {
        "title": "Task 1",
        "description": "Detailed description of task 1, fetched one task at a time.",
        "due_date": date(2026, 11, 5),
        "location": "Office",
        "tags": ["work"],
    },
    {
        "title": "Task 2",
        "description": "Detailed description of task 2, fetched one task at a time.",
        "due_date": date(2026, 10, 25),
        "location": "Home",
        "tags": ["home", "urgent"],
    },
    {
        "title": "Task 3",
        "description": "Detailed description of task 3, fetched one task at a time.",
        "due_date": None,
        "location": None,
        "tags": [],
    },
    {
        "title": "Task 4",
        "description": "Detailed description of task 4, fetched one task at a time.",
        "due_date": date(2026, 10, 30),
        "location": "Supermarket",
        "tags": ["shopping"],
    },
    {
        "title": "Task 5",
        "description": "Detailed description of task 5, fetched one task at a time.",
        "due_date": date(2026, 12, 1),
        "location": "Office",
        "tags": ["work", "urgent"],
    },
]


async def seed_db(db: AsyncSession) -> int:
    """
    Заполнить пустую БД задачами из SEED_TASKS.

    Returns:
        Количество созданных задач
    """
    service = TaskService(db)

    for index, data in enumerate(SEED_TASKS):
        task = await service.create_task(
            title=data["title"],
            description=data["description"],
            due_date=data["due_date"],
            location=data["location"],
            tag_names=data["tags"],
        )
        if index % 2 == 0:
            await service.task_repo.update(task.id, status=TaskStatus.COMPLETED)

    logger.info("Database seeded with demo tasks", extra={"count": len(SEED_TASKS)})
    return len(SEED_TASKS)
