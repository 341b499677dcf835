"""SQLAlchemy models for the N+1 Task Manager."""

from .base import Base, CreatedAtMixin, TimestampMixin
from .tag import Tag
from .task import Task, TaskStatus
from .task_tag import task_tags

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "Tag",
    "Task",
    "TaskStatus",
    "task_tags",
]
