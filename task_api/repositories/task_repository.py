"""Task repository for database operations."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from task_api.db.mixins import now_utc
from task_api.models.task import Task
from task_api.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for the Task model."""

    def __init__(self, db_session: Session):
        super().__init__(Task, db_session)

    def get_all(self) -> List[Task]:
        """Get every task, newest first."""
        stmt = select(Task).order_by(Task.created_at.desc(), Task.id.desc())
        return list(self.db.scalars(stmt).all())

    def replace(
        self,
        id: int,
        *,
        title: str,
        description: Optional[str],
        completed: bool,
    ) -> Optional[Task]:
        """Replace every mutable field of a task, or return None if absent."""
        task = self.get(id)
        if task is None:
            return None
        # Set explicitly: onupdate does not fire when no column changed.
        return self.update(
            task,
            title=title,
            description=description,
            completed=completed,
            updated_at=now_utc(),
        )
