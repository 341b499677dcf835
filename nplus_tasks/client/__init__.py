"""Client side of the N+1 demo: REST wrapper and the fetch-orchestrating view."""

from .api import TaskApiClient, TaskClientError, task_payload
from .models import TagRef, TaskDetail, TaskSummary
from .view import FetchMode, TaskClientView, parse_tags

__all__ = [
    "TaskApiClient",
    "TaskClientError",
    "task_payload",
    "TaskSummary",
    "TaskDetail",
    "TagRef",
    "TaskClientView",
    "FetchMode",
    "parse_tags",
]
