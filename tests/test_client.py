"""
Тесты для клиента (TaskApiClient + TaskClientView).

Проверяем:
- N+1 последовательность: 1 запрос списка + N запросов деталей, параллельно
- batched-режим: один запрос
- Мутации с последующим полным refresh
- Обработку ошибок: список не меняется, ошибка пробрасывается
"""

import asyncio
from datetime import date

import httpx
import pytest

from nplus_tasks.client import (
    FetchMode,
    TaskApiClient,
    TaskClientError,
    TaskClientView,
    parse_tags,
    task_payload,
)
from nplus_tasks.models import TaskStatus

# ============================================================================
# HELPERS
# ============================================================================


def test_parse_tags():
    assert parse_tags("work, urgent") == ["work", "urgent"]
    assert parse_tags(" a ,, b ,  ") == ["a", "b"]
    assert parse_tags("") == []


def test_task_payload():
    payload = task_payload("Buy milk", due_date=date(2026, 10, 20), tags=["shopping"])

    assert payload == {
        "title": "Buy milk",
        "description": None,
        "due_date": "2026-10-20",
        "location": None,
        "tags": ["shopping"],
    }
    assert "tags" not in task_payload("No tags")


def test_status_toggled():
    assert TaskStatus.PENDING.toggled() is TaskStatus.COMPLETED
    assert TaskStatus.COMPLETED.toggled() is TaskStatus.PENDING


def detail_json(task_id: int) -> dict:
    return {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": None,
        "due_date": None,
        "location": None,
        "status": "pending",
        "createdAt": "2026-10-19T12:00:00",
        "updatedAt": "2026-10-19T12:00:00",
        "tags": [],
    }


class FanOutRecorder:
    """MockTransport handler: отдаёт N задач и считает параллельные детальные запросы."""

    def __init__(self, count: int, failing_id: int | None = None):
        self.count = count
        self.failing_id = failing_id
        self.in_flight = 0
        self.max_in_flight = 0
        self.paths: list[str] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        if request.url.path == "/tasks":
            return httpx.Response(
                200,
                json=[
                    {"id": i, "title": f"Task {i}", "due_date": None}
                    for i in range(1, self.count + 1)
                ],
            )

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1

        task_id = int(request.url.path.rsplit("/", 1)[1])
        if task_id == self.failing_id:
            return httpx.Response(
                500,
                json={"error": {"code": "STORAGE_ERROR", "message": "boom", "details": None}},
            )
        return httpx.Response(200, json=detail_json(task_id))


# ============================================================================
# FAN-OUT (MockTransport)
# ============================================================================


@pytest.mark.asyncio
async def test_detail_requests_are_dispatched_concurrently():
    """Test: все N детальных запросов в полёте одновременно, без лимита."""
    recorder = FanOutRecorder(count=8)

    async with TaskApiClient("http://test", transport=httpx.MockTransport(recorder)) as api:
        view = TaskClientView(api)
        tasks = await view.load()

    assert [t.id for t in tasks] == list(range(1, 9))
    assert recorder.paths[0] == "/tasks"
    assert sorted(recorder.paths[1:]) == sorted(f"/tasks/{i}" for i in range(1, 9))
    assert recorder.max_in_flight == 8
    assert api.request_count == 9


@pytest.mark.asyncio
async def test_failed_detail_aborts_refresh():
    """Test: ошибка одного детального запроса -> весь refresh падает, старый список остаётся."""
    transport = httpx.MockTransport(FanOutRecorder(3))
    async with TaskApiClient("http://test", transport=transport) as api:
        view = TaskClientView(api)
        previous = await view.load()

    recorder = FanOutRecorder(count=3, failing_id=2)
    async with TaskApiClient("http://test", transport=httpx.MockTransport(recorder)) as api:
        view.api = api
        with pytest.raises(TaskClientError) as exc_info:
            await view.refresh()

    assert exc_info.value.status_code == 500
    assert exc_info.value.error["code"] == "STORAGE_ERROR"
    assert view.tasks == previous
    assert view.loading is False
    assert view.last_error is exc_info.value


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with TaskApiClient("http://test", transport=httpx.MockTransport(handler)) as api:
        view = TaskClientView(api)
        with pytest.raises(TaskClientError) as exc_info:
            await view.load()

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert view.tasks == []
    assert view.loading is False


# ============================================================================
# AGAINST THE APP (ASGITransport)
# ============================================================================


@pytest.mark.asyncio
async def test_load_n_plus_one(api_client: TaskApiClient):
    """Test: load() = 1 + N запросов, детали в порядке списка."""
    await api_client.create_task(task_payload("Later", due_date=date(2026, 12, 1), tags=["a"]))
    await api_client.create_task(task_payload("Sooner", due_date=date(2026, 11, 1)))
    await api_client.create_task(task_payload("Someday", location="Home"))

    view = TaskClientView(api_client)
    before = api_client.request_count
    tasks = await view.load()

    assert api_client.request_count - before == 1 + 3
    assert [t.title for t in tasks] == ["Sooner", "Later", "Someday"]
    assert tasks[1].tag_names == ["a"]
    assert tasks[2].location == "Home"
    assert view.tasks == tasks
    assert view.loading is False


@pytest.mark.asyncio
async def test_load_batched(api_client: TaskApiClient):
    """Test: batched-режим собирает тот же список одним запросом."""
    for title in ("One", "Two", "Three"):
        await api_client.create_task(task_payload(title, tags=["x"]))

    n_plus_one = await TaskClientView(api_client).load()

    view = TaskClientView(api_client, mode=FetchMode.BATCHED)
    before = api_client.request_count
    batched = await view.load()

    assert api_client.request_count - before == 1
    assert [t.id for t in batched] == [t.id for t in n_plus_one]
    assert [t.tag_names for t in batched] == [["x"], ["x"], ["x"]]


@pytest.mark.asyncio
async def test_filters_apply_only_on_refresh(api_client: TaskApiClient):
    await api_client.create_task(task_payload("Buy milk", tags=["shopping"]))
    await api_client.create_task(task_payload("Write report", tags=["work"]))

    view = TaskClientView(api_client)
    await view.load()

    view.tag = "work"
    assert len(view.tasks) == 2

    await view.refresh()
    assert [t.title for t in view.tasks] == ["Write report"]

    # load() всегда без фильтров
    await view.load()
    assert len(view.tasks) == 2

    view.query = "milk"
    view.tag = "shopping"
    await view.refresh()
    assert [t.title for t in view.tasks] == ["Buy milk"]

    view.clear_filters()
    await view.refresh()
    assert len(view.tasks) == 2


@pytest.mark.asyncio
async def test_create_then_refresh(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    await view.load()

    tasks = await view.create_task("Buy milk", description="2 liters", tags="shopping, home")

    assert [t.title for t in tasks] == ["Buy milk"]
    assert sorted(tasks[0].tag_names) == ["home", "shopping"]
    assert tasks[0].status is TaskStatus.PENDING


@pytest.mark.asyncio
async def test_create_blank_title_sends_nothing(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    before = api_client.request_count

    with pytest.raises(ValueError, match="Title required"):
        await view.create_task("  ")

    assert api_client.request_count == before


@pytest.mark.asyncio
async def test_update_replaces_tags(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    await view.create_task("Task", tags=["a", "b"])
    task = view.tasks[0]

    tasks = await view.update_task(task.id, title="Task v2", status=task.status, tags=["c"])

    assert tasks[0].title == "Task v2"
    assert tasks[0].tag_names == ["c"]


@pytest.mark.asyncio
async def test_update_without_tags_keeps_tags(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    await view.create_task("Task", tags=["keep"])
    task = view.tasks[0]

    tasks = await view.update_task(task.id, title="Renamed")

    assert tasks[0].title == "Renamed"
    assert tasks[0].tag_names == ["keep"]


@pytest.mark.asyncio
async def test_toggle_status_keeps_everything_else(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    await view.create_task(
        "Task",
        description="desc",
        tags=["keep"],
        due_date=date(2026, 10, 20),
        location="Office",
    )

    tasks = await view.toggle_status(view.tasks[0])
    assert tasks[0].status is TaskStatus.COMPLETED
    assert tasks[0].tag_names == ["keep"]
    assert tasks[0].description == "desc"
    assert tasks[0].due_date == date(2026, 10, 20)
    assert tasks[0].location == "Office"

    tasks = await view.toggle_status(tasks[0])
    assert tasks[0].status is TaskStatus.PENDING


@pytest.mark.asyncio
async def test_delete_then_refresh(api_client: TaskApiClient):
    view = TaskClientView(api_client)
    await view.create_task("First")
    await view.create_task("Second")
    first = next(t for t in view.tasks if t.title == "First")

    tasks = await view.delete_task(first.id)

    assert [t.title for t in tasks] == ["Second"]


@pytest.mark.asyncio
async def test_failed_mutation_leaves_state(api_client: TaskApiClient):
    """Test: ошибка мутации пробрасывается, список не перезагружается."""
    view = TaskClientView(api_client)
    await view.create_task("Task")
    snapshot = list(view.tasks)
    before = api_client.request_count

    with pytest.raises(TaskClientError) as exc_info:
        await view.delete_task(999)

    assert exc_info.value.is_not_found
    assert exc_info.value.error["code"] == "NOT_FOUND"
    assert api_client.request_count - before == 1
    assert view.tasks == snapshot


@pytest.mark.asyncio
async def test_get_missing_task(api_client: TaskApiClient):
    with pytest.raises(TaskClientError) as exc_info:
        await api_client.get_task(12345)

    assert exc_info.value.is_not_found
