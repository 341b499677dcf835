"""
Pytest fixtures для тестов.

Предоставляет:
- test_db: изолированная SQLite in-memory БД для каждого теста
- test_app: приложение без искусственной задержки и без демо-данных
- test_client: HTTP клиент для тестирования API endpoints
- api_client: клиент Task Store (nplus_tasks.client) поверх того же приложения
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from nplus_tasks.api.dependencies import get_db
from nplus_tasks.client import TaskApiClient
from nplus_tasks.core.config import Settings
from nplus_tasks.main import create_app, reset_rate_limits
from nplus_tasks.models import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        SIMULATED_LATENCY_MS=0,
        SEED_ON_STARTUP=False,
        LOG_LEVEL="WARNING",
        LOG_FORMAT="simple",
    )


@pytest_asyncio.fixture
async def test_engine():
    """
    Async engine для тестовой БД (SQLite in-memory).

    StaticPool держит одно соединение: иначе in-memory данные теряются.
    Таблицы пересоздаются для каждого теста.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Async session для тестов репозиториев и сервисов."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_app(test_engine, test_settings):
    """
    Приложение, у которого get_db смотрит в тестовую БД.

    Lifespan через ASGITransport не запускается, поэтому схему создаёт test_engine.
    """
    app = create_app(test_settings)
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits(app)
    yield app
    app.dependency_overrides.clear()
    reset_rate_limits(app)
    # /health ходит в собственный engine приложения
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app):
    """HTTP клиент для тестирования API endpoints."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api_client(test_app):
    """TaskApiClient, отправляющий запросы прямо в ASGI приложение."""
    async with TaskApiClient("http://test", transport=ASGITransport(app=test_app)) as client:
        yield client


@pytest.fixture(scope="session")
def anyio_backend():
    """Используем asyncio для всех async тестов."""
    return "asyncio"
