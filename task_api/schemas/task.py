from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TaskCreate(BaseModel):
    """Request body for creating a task.

    ``title`` is optional at the schema level so a missing title is
    reported by the service as a validation error rather than by FastAPI.
    """

    title: Optional[str] = None
    description: Optional[str] = ""


class TaskUpdate(TaskCreate):
    """Request body for replacing a task's mutable fields."""

    completed: bool = False


class SampleTask(BaseModel):
    """A task from the in-memory sample list."""

    id: int
    title: str
    description: str = ""
    completed: bool = False


class TaskRead(BaseModel):
    """A persisted task as returned by the API."""

    id: int
    title: str
    description: Optional[str] = ""
    completed: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Deploy to the cloud",
                "description": "",
                "completed": False,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    )
