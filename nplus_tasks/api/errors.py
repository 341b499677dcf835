"""
Обработчики ошибок (Exception Handlers) для API.

Все ошибки отдаются клиенту в одном формате ErrorResponse:
- APIError (NotFoundError, ValidationError_) -> их status_code
- ошибки валидации Pydantic -> 422
- SQLAlchemyError -> 500 STORAGE_ERROR без внутренних деталей
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class APIError(Exception):
    """
    Базовый класс для всех API ошибок.

    Использование:
        raise APIError(code="NOT_FOUND", message="Задача не найдена", status_code=404)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: list[dict] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """
    Ресурс не найден (404).

    Использование:
        raise NotFoundError("Task", 123)
        # Сообщение: "Task с id=123 не найден"
    """

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} с id={resource_id} не найден",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ValidationError_(APIError):
    """
    Ошибка валидации бизнес-логики (400).

    Использование:
        raise ValidationError_("Task title cannot be empty", field="title")
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[{"field": field, "message": message}] if field else None,
        )


def _error_response(
    status_code: int, code: str, message: str, details: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump())


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """APIError -> ErrorResponse с кодом исключения."""
    logger.warning(f"API Error: {exc.code} - {exc.message}")

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    return _error_response(exc.status_code, exc.code, exc.message, details)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Ошибки валидации Pydantic (422) в нашем формате.

    {"detail": [{"loc": ["body", "title"], "msg": "..."}]}
    превращается в
    {"error": {"code": "VALIDATION_ERROR", "details": [{"field": "title", ...}]}}
    """
    logger.warning(f"Validation Error: {exc.errors()}")

    details = []
    for error in exc.errors():
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        # Для полей body убираем префикс "body"
        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(
            ErrorDetail(field=str(field_name), message=error.get("msg", "Ошибка валидации"))
        )

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Ошибка валидации входных данных",
        details,
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Любая ошибка хранилища (500).

    Клиент не видит деталей, полная ошибка уходит в лог.
    """
    logger.error(f"Storage Error: {type(exc).__name__}: {exc}", exc_info=exc)

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR", "Ошибка хранилища данных"
    )


def register_error_handlers(app: FastAPI) -> None:
    """Регистрирует все error handlers в приложении FastAPI."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    logger.debug("Error handlers registered")
