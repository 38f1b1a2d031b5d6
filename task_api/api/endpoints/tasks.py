"""Read-only sample task endpoints."""

from fastapi import APIRouter, Depends

from task_api.api import deps
from task_api.core.config import Settings
from task_api.services import SampleTaskService

router = APIRouter()


@router.get("")
def list_sample_tasks(
    service: SampleTaskService = Depends(deps.get_sample_task_service),
    settings: Settings = Depends(deps.get_settings),
):
    """List the in-memory tasks, truncated to ``MAX_TASKS``."""
    tasks = service.list_tasks()
    return {
        "success": True,
        "tasks": [task.model_dump() for task in tasks],
        "count": len(tasks),
        "limit": service.max_tasks,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/{task_id}")
def get_sample_task(
    task_id: int,
    service: SampleTaskService = Depends(deps.get_sample_task_service),
):
    """Return a task synthesized from its id."""
    return {"success": True, "task": service.get_task(task_id).model_dump()}
