"""Read-only task list held in memory."""

from typing import List

from task_api.core.config import DEFAULT_MAX_TASKS
from task_api.schemas.task import SampleTask

SAMPLE_TASKS = (
    SampleTask(id=1, title="Learn cloud app hosting", completed=False),
    SampleTask(id=2, title="Deploy to the cloud", completed=True),
    SampleTask(id=3, title="Master DevOps", completed=False),
    SampleTask(id=4, title="Configure environment variables", completed=False),
    SampleTask(id=5, title="Add application monitoring", completed=False),
)


class SampleTaskService:
    """Serves a fixed list of tasks seeded at startup.

    There is no create, update or delete; the list never changes.
    """

    def __init__(self, max_tasks: int = DEFAULT_MAX_TASKS):
        self.max_tasks = max_tasks

    def list_tasks(self) -> List[SampleTask]:
        return list(SAMPLE_TASKS[: self.max_tasks])

    def get_task(self, task_id: int) -> SampleTask:
        # Synthesized from the id; the seeded list is not consulted.
        return SampleTask(id=task_id, title=f"Task {task_id}")
