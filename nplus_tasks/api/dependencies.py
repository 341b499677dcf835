"""
Dependencies для FastAPI endpoints.

Сессия БД берётся из handle Database, который фабрика приложения
положила в app.state.database. Тесты подменяют get_db через
app.dependency_overrides.
"""

import asyncio
from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..services import TaskService


def get_settings(request: Request) -> Settings:
    """Настройки, с которыми было создано приложение."""
    return request.app.state.settings


# ============================================================================
# DATABASE SESSION DEPENDENCY
# ============================================================================


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency для получения сессии БД.

    Одна сессия = одна транзакция на запрос:
    commit() при успехе, rollback() при любой ошибке.
    """
    async with request.app.state.database.session() as session:
        yield session


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    """
    Dependency для TaskService.

    Цепочка: get_db -> get_task_service -> endpoint
    """
    return TaskService(db)


# ============================================================================
# SIMULATED LATENCY
# ============================================================================


async def simulate_latency(settings: Settings = Depends(get_settings)) -> None:
    """
    Искусственная сетевая задержка для read endpoints.

    Каждый из N детальных запросов ждёт одинаково, поэтому параллельная
    загрузка занимает примерно "список + самый медленный детальный запрос".
    """
    if settings.SIMULATED_LATENCY_MS > 0:
        await asyncio.sleep(settings.SIMULATED_LATENCY_MS / 1000)
