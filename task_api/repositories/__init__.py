"""Repositories package for database operations.

Repository classes wrap a SQLAlchemy session and encapsulate the query
logic for a single model.
"""

from task_api.repositories.base import BaseRepository
from task_api.repositories.task_repository import TaskRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
]
