"""Tag model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin


class Tag(Base, CreatedAtMixin):
    """
    Tag model.

    Для клиентов ключом тега является name; суррогатный id живёт только в БД.
    """

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    # Relationships
    tasks: Mapped[list["Task"]] = relationship(  # noqa: F821
        "Task", secondary="task_tags", back_populates="tags"
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
