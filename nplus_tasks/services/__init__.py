"""Service layer with business logic."""

from .task import TaskNotFoundError, TaskService, normalize_tag_names

__all__ = [
    "TaskService",
    "TaskNotFoundError",
    "normalize_tag_names",
]
