"""
Persistent task store backed by a relational database.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_api.core.exceptions import (
    DatabaseError,
    NotConfiguredError,
    ValidationError,
)
from task_api.db.base import Base
from task_api.db.session import create_db_engine, create_session_factory
from task_api.models.task import Task
from task_api.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _require_title(title: Optional[str]) -> None:
    if title is None or not title.strip():
        raise ValidationError("Title is required")


class DatabaseTaskService:
    """CRUD operations on the ``tasks`` table.

    The engine (and its connection pool) is created once here and reused
    for the life of the process. Without a database URL the service stays
    unconfigured and every operation raises ``NotConfiguredError`` without
    touching the network.
    """

    def __init__(self, database_url: Optional[str]):
        self.engine = None
        self._session_factory = None
        self.is_configured = False

        if not database_url:
            logger.info("Database not configured - missing DATABASE_URL")
            return

        try:
            self.engine = create_db_engine(database_url)
            self._session_factory = create_session_factory(self.engine)
        except Exception as e:
            logger.error("Error initializing database: %s", e, exc_info=True)
            self.engine = None
            return

        self.is_configured = True
        logger.info("Database service initialized")

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise NotConfiguredError("Database not configured")

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error.

        SQLAlchemy failures are logged and re-raised as ``DatabaseError``.
        """
        self._require_configured()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Error %s: %s", action, e, exc_info=True)
            raise DatabaseError(f"Failed {action}: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """Run a trivial query to confirm the database is reachable.

        Failures are logged rather than raised so startup can continue.
        """
        if not self.is_configured:
            return False
        try:
            with self.engine.connect() as connection:
                now = connection.execute(
                    text("SELECT CURRENT_TIMESTAMP")
                ).scalar()
        except SQLAlchemyError as e:
            logger.error("Database connection test failed: %s", e)
            return False
        logger.info("Database connected successfully at: %s", now)
        return True

    def initialize_schema(self) -> None:
        """Create the tasks table if it does not exist yet."""
        self._require_configured()
        try:
            Base.metadata.create_all(bind=self.engine, tables=[Task.__table__])
        except SQLAlchemyError as e:
            logger.error("Error creating table: %s", e, exc_info=True)
            raise DatabaseError(f"Failed to initialize schema: {e}") from e
        logger.info("Tasks table initialized")

    def list_tasks(self) -> List[Task]:
        with self._session("fetching tasks") as session:
            return TaskRepository(session).get_all()

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._session("fetching task") as session:
            return TaskRepository(session).get(task_id)

    def create_task(
        self, title: Optional[str], description: Optional[str] = ""
    ) -> Task:
        self._require_configured()
        _require_title(title)
        with self._session("creating task") as session:
            task = TaskRepository(session).create(
                title=title, description=description or ""
            )
        logger.info("Created task %s", task.id)
        return task

    def update_task(
        self,
        task_id: int,
        title: Optional[str],
        description: Optional[str] = "",
        completed: bool = False,
    ) -> Optional[Task]:
        """Replace title, description and completed on an existing task.

        Returns None when no task has ``task_id``.
        """
        self._require_configured()
        _require_title(title)
        with self._session("updating task") as session:
            task = TaskRepository(session).replace(
                task_id,
                title=title,
                description=description or "",
                completed=bool(completed),
            )
        if task is not None:
            logger.info("Updated task %s", task_id)
        return task

    def delete_task(self, task_id: int) -> Optional[Task]:
        with self._session("deleting task") as session:
            task = TaskRepository(session).remove(task_id)
        if task is not None:
            logger.info("Deleted task %s", task_id)
        return task

    def close(self) -> None:
        """Release the connection pool."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
