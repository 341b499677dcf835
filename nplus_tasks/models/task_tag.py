"""Task-Tag junction table."""

from sqlalchemy import Column, ForeignKey, Integer, Table

from .base import Base

# Many-to-many junction table for tasks and tags (no attributes of its own)
task_tags = Table(
    "task_tags",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id"), primary_key=True),
)
