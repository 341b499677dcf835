"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# nplus_tasks/core/config.py -> project_root/config/.env
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / "config" / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Все настройки можно переопределить через переменные окружения.
    Пример: SIMULATED_LATENCY_MS=0 uvicorn nplus_tasks.main:app --port 3000
    """

    # =========================================================================
    # Database
    # =========================================================================
    # Один файл SQLite, пересоздаётся при каждом старте приложения
    DATABASE_URL: str = "sqlite+aiosqlite:///./database.sqlite"

    # DATABASE_ECHO - выводить SQL запросы в логи (для отладки)
    DATABASE_ECHO: bool = False

    # SEED_ON_STARTUP - заполнить БД демо-задачами после сброса
    SEED_ON_STARTUP: bool = True

    # =========================================================================
    # Application
    # =========================================================================
    APP_NAME: str = "N+1 Task Manager"
    DEBUG: bool = False
    PORT: int = 3000

    # Искусственная задержка ответа для GET /tasks и GET /tasks/{id}.
    # Делает N+1 запросов хорошо заметными в логах и в демо.
    SIMULATED_LATENCY_MS: int = 100

    # Браузерный клиент живёт на другом порту
    CORS_ORIGINS: list[str] = ["*"]

    # =========================================================================
    # Logging
    # =========================================================================
    # LOG_LEVEL - DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = "INFO"

    # LOG_FORMAT - "json" (production) или "simple" (разработка)
    LOG_FORMAT: str = "json"

    # =========================================================================
    # Client
    # =========================================================================
    # API_BASE_URL - адрес Task Store для клиента и демо-скрипта
    API_BASE_URL: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", case_sensitive=True
    )


# Create global settings instance
settings = Settings()
