from fastapi import APIRouter

from task_api.api.endpoints import db_tasks, files, tasks

# The /api prefix is added in main.py
api_router = APIRouter()

api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(
    db_tasks.router, prefix="/db/tasks", tags=["database tasks"]
)
api_router.include_router(files.router, tags=["files"])
