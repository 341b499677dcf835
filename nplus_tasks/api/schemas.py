"""
Pydantic схемы для API.

Формы ответов зафиксированы контрактом N+1 клиента:
- список отдаёт только {id, title, due_date}
- детальный ответ отдаёт всё, включая теги [{name}]
- create/update возвращают задачу без тегов
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskStatus

TagName = Annotated[str, Field(max_length=50)]

# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskWrite(BaseModel):
    """Общие поля create/update."""

    title: str = Field(..., min_length=1, max_length=300, description="Название задачи")
    description: str | None = Field(None, description="Описание задачи")
    due_date: date | None = Field(None, description="Дедлайн (дата без времени)")
    location: str | None = Field(None, max_length=200, description="Место")
    tags: list[TagName] | None = Field(
        None, description="Имена тегов; создаются автоматически, если не существуют"
    )


class TaskCreate(TaskWrite):
    """
    Схема для создания задачи (POST /tasks).

    Пример запроса:
    {
        "title": "Buy milk",
        "due_date": "2026-10-20",
        "tags": ["shopping"]
    }
    """

    pass


class TaskUpdate(TaskWrite):
    """
    Схема для полной замены задачи (PUT /tasks/{id}).

    Это НЕ частичное обновление: отсутствующие поля станут null,
    отсутствующий status станет pending. Отсутствующий tags не меняет теги,
    пустой список tags отвязывает все теги.
    """

    status: TaskStatus = Field(default=TaskStatus.PENDING, description="pending | completed")


class TaskSummaryResponse(BaseModel):
    """
    Строка списка (GET /tasks).

    Только id, title и due_date: остальное клиент запрашивает по одной задаче.
    """

    id: int
    title: str
    due_date: date | None

    model_config = ConfigDict(from_attributes=True)


class TagResponse(BaseModel):
    """Тег в ответе: только имя, суррогатный id не отдаётся."""

    name: str

    model_config = ConfigDict(from_attributes=True)


class TaskResponse(BaseModel):
    """
    Задача без тегов (ответ POST /tasks и PUT /tasks/{id}).

    Пример ответа:
    {
        "id": 6,
        "title": "Buy milk",
        "description": null,
        "due_date": "2026-10-20",
        "location": null,
        "status": "pending",
        "createdAt": "2026-10-19T12:00:00",
        "updatedAt": "2026-10-19T12:00:00"
    }
    """

    id: int
    title: str
    description: str | None
    due_date: date | None
    location: str | None
    status: TaskStatus
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    # populate_by_name: из ORM модели читаем created_at, в JSON отдаём createdAt
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TaskDetailResponse(TaskResponse):
    """Задача со всеми полями и тегами (GET /tasks/{id})."""

    tags: list[TagResponse] = []


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Ошибка по конкретному полю.

    Пример:
    {"field": "title", "message": "String should have at least 1 character"}
    """

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """
    Тело ошибки.

    Коды:
    - VALIDATION_ERROR: ошибка валидации
    - NOT_FOUND: задача не найдена
    - STORAGE_ERROR: ошибка хранилища
    - RATE_LIMIT_EXCEEDED: превышен лимит запросов
    """

    code: str = Field(..., description="Код ошибки")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(default=None, description="Ошибки по полям")


class ErrorResponse(BaseModel):
    """
    Единый формат ответа для всех ошибок API.

    Пример:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Task с id=999 не найден",
            "details": null
        }
    }
    """

    error: ErrorBody


class SuccessResponse(BaseModel):
    """
    Ответ без данных.

    Пример:
    {"message": "Deleted successfully"}
    """

    message: str
