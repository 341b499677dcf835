"""
Общая основа моделей: DeclarativeBase и служебные временные метки.

На проводе метки уходят как createdAt / updatedAt (см. api/schemas.py),
в таблицах хранятся как created_at / updated_at.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    # SQLite не хранит часовой пояс: пишем naive UTC
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class CreatedAtMixin:
    """Время создания строки, проставляется хранилищем."""

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)


class TimestampMixin(CreatedAtMixin):
    """created_at + updated_at; updated_at обновляется при каждом UPDATE строки."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
