"""Client-side copies of the store's JSON payloads."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskStatus


class TaskSummary(BaseModel):
    """Строка из GET /tasks."""

    id: int
    title: str
    due_date: date | None = None


class TagRef(BaseModel):
    name: str


class TaskDetail(TaskSummary):
    """Задача из GET /tasks/{id} (или из GET /tasks/full)."""

    description: str | None = None
    location: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    tags: list[TagRef] = []

    model_config = ConfigDict(populate_by_name=True)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
