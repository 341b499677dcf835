"""Database handle: engine, session factory and the reset-on-start lifecycle."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from ..models import Base
from .logging import get_logger

logger = get_logger(__name__)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Создать async engine для указанной БД.

    SQLite требует StaticPool (одно соединение на процесс),
    для остальных движков пул не используется.
    """
    if "sqlite" in database_url:
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo, poolclass=NullPool)


class Database:
    """
    Явно создаваемый handle хранилища задач.

    Создаётся фабрикой приложения, кладётся в app.state и передаётся
    обработчикам через dependency get_db. Никакого глобального соединения.

    Пример:
        database = Database("sqlite+aiosqlite:///./database.sqlite")
        await database.reset()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.url = database_url
        self.engine = create_engine(database_url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def reset(self) -> None:
        """Drop and recreate all tables (full reset, no migrations)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database reset", extra={"database_url": self.url})

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Сессия с транзакцией на весь блок.

        commit() при успешном выходе, rollback() при любой ошибке.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Проверить, что БД отвечает (используется в /health)."""
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
