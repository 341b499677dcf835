"""
Главный файл FastAPI приложения (Task Store).

Запуск:
    uvicorn nplus_tasks.main:app --port 3000
    python -m nplus_tasks

API документация:
    http://localhost:3000/docs       - Swagger UI
    http://localhost:3000/redoc      - ReDoc

При каждом старте БД полностью пересоздаётся и заполняется демо-задачами.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from .api import tasks_router
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import Settings, settings
from .core.database import Database
from .core.logging import get_logger, setup_logging
from .seed import seed_db

logger = get_logger(__name__)

APP_VERSION = "1.0.0"

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

# Лимит только на служебные endpoints; /tasks не ограничиваем,
# иначе N+1 загрузка большого списка упрётся в лимит.
# Декораторы @limiter.limit привязаны к этому экземпляру, поэтому счётчики
# общие для всех приложений процесса (см. reset_rate_limits)
limiter = Limiter(key_func=get_remote_address)


def reset_rate_limits(app: FastAPI) -> None:
    """Обнулить счётчики лимитов (in-memory storage slowapi)."""
    app.state.limiter.reset()


def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Превышение лимита в едином формате ErrorResponse."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Слишком много запросов. Лимит: {exc.detail}",
                "details": [{"field": "rate_limit", "message": str(exc.detail)}],
            }
        },
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: сброс схемы и загрузка демо-данных.
    Shutdown: закрытие engine.
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database
    app.state.started_at = time.time()

    await database.reset()
    if app_settings.SEED_ON_STARTUP:
        async with database.session() as session:
            await seed_db(session)

    logger.info(
        "Application started",
        extra={
            "app_name": app_settings.APP_NAME,
            "version": APP_VERSION,
            "port": app_settings.PORT,
            "simulated_latency_ms": app_settings.SIMULATED_LATENCY_MS,
        },
    )

    yield

    await database.dispose()
    uptime = int(time.time() - app.state.started_at)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# SERVICE ENDPOINTS
# ============================================================================

service_router = APIRouter()


@service_router.get("/", tags=["root"], summary="Root endpoint")
@limiter.limit("100/minute")
async def root(request: Request):
    """Информация о API и полезные ссылки."""
    app_settings: Settings = request.app.state.settings
    return {
        "name": app_settings.APP_NAME,
        "version": APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "tasks": "/tasks",
            "task": "/tasks/{id}",
            "tasks_full": "/tasks/full",
        },
        "simulated_latency_ms": app_settings.SIMULATED_LATENCY_MS,
        "rate_limit": "100 requests/minute",
    }


@service_router.get("/health", tags=["health"], summary="Health check")
@limiter.limit("100/minute")
async def health_check(request: Request):
    """
    Проверка доступности API и БД.

    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-10-19T12:00:00+00:00"
    }
    ```
    При недоступной БД - 503 и "status": "error".
    """
    started_at = getattr(request.app.state, "started_at", None)
    uptime_seconds = int(time.time() - started_at) if started_at else 0

    db_status = "disconnected"
    try:
        await request.app.state.database.ping()
        db_status = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unavailable", extra={"error": str(e)})

    overall_status = "ok" if db_status == "connected" else "error"
    return JSONResponse(
        status_code=200 if overall_status == "ok" else 503,
        content={
            "status": overall_status,
            "checks": {
                "database": db_status,
                "version": APP_VERSION,
                "uptime_seconds": uptime_seconds,
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


# ============================================================================
# CREATE APPLICATION
# ============================================================================


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Фабрика приложения.

    Явно создаёт handle Database и кладёт его вместе с настройками
    в app.state: обработчики получают сессию через dependency get_db.
    """
    app_settings = app_settings or settings
    setup_logging(
        log_level=app_settings.LOG_LEVEL,
        log_format=app_settings.LOG_FORMAT,
        database_echo=app_settings.DATABASE_ECHO,
    )

    app = FastAPI(
        lifespan=lifespan,
        title=app_settings.APP_NAME,
        description="""
    Учебный Task Manager, демонстрирующий анти-паттерн N+1.

    ## Контракт

    * `GET /tasks` - только id, title, due_date
    * `GET /tasks/{id}` - все поля и теги (клиент вызывает его N раз)
    * `GET /tasks/full` - то же одним запросом, для сравнения

    ## Модель данных

    ```
    Tasks <-> Tags (M:M, тег определяется именем)
    ```
    """,
        version=APP_VERSION,
        debug=app_settings.DEBUG,
    )

    app.state.settings = app_settings
    app.state.database = Database(app_settings.DATABASE_URL, echo=app_settings.DATABASE_ECHO)

    app.state.limiter = limiter
    # slowapi handler имеет специфичный тип, но работает корректно
    app.add_exception_handler(
        RateLimitExceeded, custom_rate_limit_exceeded_handler  # type: ignore[arg-type]
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(service_router)
    app.include_router(tasks_router)

    register_error_handlers(app)

    return app


app = create_app()
