"""Task CRUD endpoints backed by the database."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from task_api.api import deps
from task_api.core.exceptions import NotFoundError
from task_api.schemas.task import TaskCreate, TaskRead, TaskUpdate
from task_api.services import DatabaseTaskService, TelemetryService

router = APIRouter()


def _serialize(task) -> dict:
    return TaskRead.model_validate(task).model_dump(mode="json")


def _not_found(task_id: int) -> NotFoundError:
    return NotFoundError(f"Task {task_id} not found")


@router.get("")
def list_tasks(
    service: DatabaseTaskService = Depends(deps.get_task_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    """List every persisted task, newest first."""
    tasks = service.list_tasks()
    telemetry.track_event("TasksListed", {"count": len(tasks)})
    return {
        "success": True,
        "tasks": [_serialize(task) for task in tasks],
        "count": len(tasks),
    }


@router.get(
    "/{task_id}",
    responses={
        404: {"description": "Not Found - Task not found"},
        503: {"description": "Database not configured"},
    },
)
def get_task(
    task_id: int,
    service: DatabaseTaskService = Depends(deps.get_task_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    task = service.get_task(task_id)
    if task is None:
        raise _not_found(task_id)
    telemetry.track_event("TaskViewed", {"taskId": task_id})
    return {"success": True, "task": _serialize(task)}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Title is required"},
        503: {"description": "Database not configured"},
    },
)
def create_task(
    payload: Optional[TaskCreate] = None,
    service: DatabaseTaskService = Depends(deps.get_task_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    # A missing body is a missing title, reported after the database check.
    payload = payload or TaskCreate()
    task = service.create_task(payload.title, payload.description)
    telemetry.track_event("TaskCreated", {"taskId": task.id})
    return {"success": True, "task": _serialize(task)}


@router.put(
    "/{task_id}",
    responses={
        400: {"description": "Title is required"},
        404: {"description": "Not Found - Task not found"},
        503: {"description": "Database not configured"},
    },
)
def update_task(
    task_id: int,
    payload: Optional[TaskUpdate] = None,
    service: DatabaseTaskService = Depends(deps.get_task_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    """
    Replace a task's title, description and completed flag.

    Fields left out of the body are reset to their defaults, not kept.
    """
    payload = payload or TaskUpdate()
    task = service.update_task(
        task_id, payload.title, payload.description, payload.completed
    )
    if task is None:
        raise _not_found(task_id)
    telemetry.track_event(
        "TaskUpdated", {"taskId": task_id, "completed": task.completed}
    )
    return {"success": True, "task": _serialize(task)}


@router.delete(
    "/{task_id}",
    responses={
        404: {"description": "Not Found - Task not found"},
        503: {"description": "Database not configured"},
    },
)
def delete_task(
    task_id: int,
    service: DatabaseTaskService = Depends(deps.get_task_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    task = service.delete_task(task_id)
    if task is None:
        raise _not_found(task_id)
    telemetry.track_event("TaskDeleted", {"taskId": task_id})
    return {
        "success": True,
        "message": "Task deleted",
        "task": _serialize(task),
    }
