"""HTTP client for the Task Store REST API."""

from datetime import date
from typing import Any

import httpx

from ..core.logging import get_logger
from .models import TaskDetail, TaskSummary

logger = get_logger(__name__)


class TaskClientError(Exception):
    """
    Ошибка запроса к Task Store.

    status_code - HTTP статус (None, если ответа не было)
    error - тело ошибки сервера {"code", "message", "details"} или None
    """

    def __init__(self, message: str, status_code: int | None = None, error: dict | None = None):
        self.status_code = status_code
        self.error = error
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "TaskClientError":
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if error else response.reason_phrase
        return cls(
            f"{response.request.method} {response.request.url.path} failed: "
            f"{response.status_code} {message}",
            status_code=response.status_code,
            error=error,
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def task_payload(
    title: str,
    description: str | None = None,
    due_date: date | None = None,
    location: str | None = None,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """JSON тело для POST/PUT /tasks."""
    payload: dict[str, Any] = {
        "title": title,
        "description": description,
        "due_date": due_date.isoformat() if due_date else None,
        "location": location,
        **extra,
    }
    if tags is not None:
        payload["tags"] = tags
    return payload


class TaskApiClient:
    """
    Тонкая обёртка над httpx.AsyncClient: один метод на один endpoint.

    Никакого кэша, батчинга и ретраев. Каждый запрос, ответ и ошибка
    логируются через event hooks, счётчик request_count позволяет
    увидеть 1 + N запросов.

    Пример:
        async with TaskApiClient("http://localhost:3000") as api:
            summaries = await api.list_tasks(tag="work")
            task = await api.get_task(summaries[0].id)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.request_count = 0
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            event_hooks={"request": [self._on_request], "response": [self._on_response]},
        )

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Logging hooks
    # ------------------------------------------------------------------

    async def _on_request(self, request: httpx.Request) -> None:
        self.request_count += 1
        logger.info(
            "Request sent",
            extra={"method": request.method, "url": str(request.url)},
        )

    async def _on_response(self, response: httpx.Response) -> None:
        request = response.request
        log = logger.info if response.is_success else logger.warning
        log(
            "Response received" if response.is_success else "Error response received",
            extra={
                "method": request.method,
                "url": str(request.url),
                "status": response.status_code,
            },
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request failed", extra={"method": method, "path": url, "error": str(e)})
            raise TaskClientError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            raise TaskClientError.from_response(response)
        return response.json()

    @staticmethod
    def _filters(q: str | None, tag: str | None) -> dict[str, str]:
        params = {}
        if q:
            params["q"] = q
        if tag:
            params["tag"] = tag
        return params

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def list_tasks(self, q: str | None = None, tag: str | None = None) -> list[TaskSummary]:
        """GET /tasks?q=&tag="""
        data = await self._request("GET", "/tasks", params=self._filters(q, tag))
        return [TaskSummary.model_validate(item) for item in data]

    async def list_tasks_full(
        self, q: str | None = None, tag: str | None = None
    ) -> list[TaskDetail]:
        """GET /tasks/full?q=&tag="""
        data = await self._request("GET", "/tasks/full", params=self._filters(q, tag))
        return [TaskDetail.model_validate(item) for item in data]

    async def get_task(self, task_id: int) -> TaskDetail:
        """GET /tasks/{id}"""
        return TaskDetail.model_validate(await self._request("GET", f"/tasks/{task_id}"))

    async def create_task(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST /tasks. Ответ без тегов."""
        return await self._request("POST", "/tasks", json=payload)

    async def update_task(self, task_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """PUT /tasks/{id}. Ответ без тегов."""
        return await self._request("PUT", f"/tasks/{task_id}", json=payload)

    async def delete_task(self, task_id: int) -> dict[str, Any]:
        """DELETE /tasks/{id}"""
        return await self._request("DELETE", f"/tasks/{task_id}")
