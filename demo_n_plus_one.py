"""
Демонстрация N+1 запросов.

Сравнивает два способа собрать список задач у запущенного Task Store:
1. N+1: GET /tasks, затем GET /tasks/{id} для каждой задачи
2. Batched: один GET /tasks/full

Запуск:
    python -m nplus_tasks            # в одном терминале
    python demo_n_plus_one.py        # в другом
"""

import asyncio
import time

from nplus_tasks.client import FetchMode, TaskApiClient, TaskClientView
from nplus_tasks.core.config import settings
from nplus_tasks.core.logging import setup_logging


async def run_mode(mode: FetchMode) -> None:
    async with TaskApiClient(settings.API_BASE_URL) as api:
        view = TaskClientView(api, mode=mode)

        started = time.perf_counter()
        tasks = await view.load()
        duration_ms = int((time.perf_counter() - started) * 1000)

        print(f"=== {mode.value} ===")
        print(f"  Задач: {len(tasks)}")
        print(f"  HTTP запросов: {api.request_count}")
        print(f"  Время: {duration_ms} мс")
        for task in tasks:
            tags = ", ".join(task.tag_names) or "-"
            status = task.status.value
            print(f"  #{task.id} {task.title} [{status}] due={task.due_date} tags={tags}")
        print()


async def main():
    setup_logging(log_level="WARNING", log_format="simple")

    await run_mode(FetchMode.N_PLUS_ONE)
    await run_mode(FetchMode.BATCHED)

    print("Вывод: N+1 делает 1 + N запросов, но из-за параллельной отправки")
    print("время близко к 'список + самый медленный детальный запрос'.")


if __name__ == "__main__":
    asyncio.run(main())
