"""Task model."""

import enum
from datetime import date

from sqlalchemy import Date, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "TaskStatus":
        """pending <-> completed."""
        return TaskStatus.PENDING if self is TaskStatus.COMPLETED else TaskStatus.COMPLETED


class Task(Base, TimestampMixin):
    """Task model with an optional set of tags."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=TaskStatus.PENDING,
        nullable=False,
    )

    # Tags relationship (many-to-many)
    tags: Mapped[list["Tag"]] = relationship(  # noqa: F821
        "Tag", secondary="task_tags", back_populates="tasks"
    )

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"
