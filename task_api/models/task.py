"""Database model for persisted tasks."""

from typing import Optional

from sqlalchemy import Boolean, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from task_api.db.base import Base
from task_api.db.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """Database model for a to-do task.

    Attributes:
        id: Primary key, assigned by the database
        title: Task title (required)
        description: Free-form description, empty by default
        completed: Whether the task is done

    Inherited from TimestampMixin:
        created_at: Timestamp when the task was created
        updated_at: Timestamp when the task was last updated
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, default=""
    )
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    def __repr__(self) -> str:
        return f"<Task {self.title!r} (ID: {self.id})>"
