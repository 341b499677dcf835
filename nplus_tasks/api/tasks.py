"""
API endpoints для работы с задачами.

Контракт специально устроен под N+1:
- GET /tasks отдаёт только id, title, due_date
- за остальным клиент идёт в GET /tasks/{id} по одному запросу на задачу

GET /tasks/full - тот же список одним запросом, для сравнения.
"""

from fastapi import APIRouter, Depends, Query, status

from ..services import TaskNotFoundError, TaskService
from .dependencies import get_task_service, simulate_latency
from .errors import NotFoundError, ValidationError_
from .schemas import (
    ErrorResponse,
    SuccessResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskResponse,
    TaskSummaryResponse,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


# ============================================================================
# LIST TASKS (summary)
# ============================================================================


@router.get(
    "",
    response_model=list[TaskSummaryResponse],
    dependencies=[Depends(simulate_latency)],
    summary="Список задач (только id, title, due_date)",
    description="""
    Облегчённый список задач.

    **Фильтры:**
    - q: подстрока в title, description или location (без учёта регистра)
    - tag: точное имя тега

    Фильтры комбинируются через AND. Сортировка по due_date,
    задачи без даты в конце.
    """,
)
async def list_tasks(
    q: str | None = Query(None, description="Поиск по title/description/location"),
    tag: str | None = Query(None, description="Точное имя тега"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskSummaryResponse]:
    """
    Примеры запросов:
    ```
    GET /tasks
    GET /tasks?q=milk
    GET /tasks?tag=shopping
    GET /tasks?q=milk&tag=shopping
    ```
    """
    rows = await service.list_tasks(q=q, tag=tag)
    return [TaskSummaryResponse.model_validate(row) for row in rows]


@router.get(
    "/full",
    response_model=list[TaskDetailResponse],
    dependencies=[Depends(simulate_latency)],
    summary="Список задач со всеми полями и тегами",
    description="Batched-режим: те же фильтры и порядок, что у GET /tasks, но одним запросом.",
)
async def list_tasks_full(
    q: str | None = Query(None, description="Поиск по title/description/location"),
    tag: str | None = Query(None, description="Точное имя тега"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskDetailResponse]:
    tasks = await service.list_tasks_full(q=q, tag=tag)
    return [TaskDetailResponse.model_validate(task) for task in tasks]


# ============================================================================
# GET TASK BY ID
# ============================================================================


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    dependencies=[Depends(simulate_latency)],
    summary="Получить задачу по ID",
    responses={
        200: {"description": "Задача найдена"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def get_task(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> TaskDetailResponse:
    """Все поля задачи плюс теги: `{"tags": [{"name": "shopping"}]}`."""
    try:
        task = await service.get_task(task_id)
    except TaskNotFoundError:
        raise NotFoundError("Task", task_id)
    return TaskDetailResponse.model_validate(task)


# ============================================================================
# CREATE TASK
# ============================================================================


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    responses={
        201: {"description": "Задача создана"},
        400: {"model": ErrorResponse, "description": "Пустое название"},
        422: {"model": ErrorResponse, "description": "Ошибка валидации"},
    },
)
async def create_task(
    data: TaskCreate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """
    Создать новую задачу. Теги создаются автоматически.

    Пример запроса:
    ```json
    {
        "title": "Buy milk",
        "description": "2 liters",
        "due_date": "2026-10-20",
        "location": "Supermarket",
        "tags": ["shopping"]
    }
    ```

    Ответ не содержит тегов: чтобы их увидеть, нужен GET /tasks/{id}.
    """
    try:
        task = await service.create_task(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            location=data.location,
            tag_names=data.tags,
        )
    except ValueError as e:
        raise ValidationError_(str(e), field="title")
    return TaskResponse.model_validate(task)


# ============================================================================
# UPDATE TASK
# ============================================================================


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Заменить задачу",
    description="""
    Полная замена задачи: все поля перезаписываются.

    Если передан tags, набор тегов заменяется целиком (сначала все
    отвязываются, затем привязывается каждый из списка).
    """,
    responses={
        200: {"description": "Задача обновлена"},
        400: {"model": ErrorResponse, "description": "Пустое название"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def update_task(
    task_id: int, data: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """
    Пример запроса:
    ```json
    {
        "title": "Buy milk",
        "description": "2 liters",
        "status": "completed",
        "tags": ["shopping", "home"]
    }
    ```
    """
    try:
        task = await service.update_task(
            task_id=task_id,
            title=data.title,
            description=data.description,
            status=data.status,
            due_date=data.due_date,
            location=data.location,
            tag_names=data.tags,
        )
    except TaskNotFoundError:
        raise NotFoundError("Task", task_id)
    except ValueError as e:
        raise ValidationError_(str(e), field="title")
    return TaskResponse.model_validate(task)


# ============================================================================
# DELETE TASK
# ============================================================================


@router.delete(
    "/{task_id}",
    response_model=SuccessResponse,
    summary="Удалить задачу",
    responses={
        200: {"description": "Задача удалена"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def delete_task(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> SuccessResponse:
    """Удалить задачу. Неиспользуемые теги остаются."""
    try:
        await service.delete_task(task_id)
    except TaskNotFoundError:
        raise NotFoundError("Task", task_id)
    return SuccessResponse(message="Deleted successfully")
