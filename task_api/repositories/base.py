"""Base repository for database operations.

This module provides a base repository class that implements common
CRUD operations using a SQLAlchemy session.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from task_api.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository class with CRUD operations.

    Committing is left to the caller, which owns the session.

    Args:
        model: SQLAlchemy model class
        db_session: Database session
    """

    def __init__(self, model: Type[ModelType], db_session: Session):
        self.model = model
        self.db = db_session

    def get(self, id: Any) -> Optional[ModelType]:
        """Get a single record by ID."""
        return self.db.get(self.model, id)

    def create(self, **values: Any) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**values)
        self.db.add(db_obj)
        self.db.flush()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, **values: Any) -> ModelType:
        """Overwrite the given columns of an existing record."""
        for field, value in values.items():
            setattr(db_obj, field, value)
        self.db.add(db_obj)
        self.db.flush()
        self.db.refresh(db_obj)
        return db_obj

    def remove(self, id: Any) -> Optional[ModelType]:
        """Remove a record by ID."""
        obj = self.get(id)
        if obj is not None:
            self.db.delete(obj)
            self.db.flush()
        return obj
