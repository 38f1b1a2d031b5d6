# Import models to make them available when importing from task_api.models
from task_api.models.task import Task  # noqa: F401

__all__ = ["Task"]
