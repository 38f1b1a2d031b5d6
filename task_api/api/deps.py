"""Dependencies for API endpoints."""

from fastapi import Depends, Request

from task_api.core.config import Settings
from task_api.services import (
    DatabaseTaskService,
    SampleTaskService,
    ServiceContainer,
    StorageService,
    TelemetryService,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_sample_task_service(
    services: ServiceContainer = Depends(get_services),
) -> SampleTaskService:
    return services.sample_tasks


def get_task_service(
    services: ServiceContainer = Depends(get_services),
) -> DatabaseTaskService:
    return services.tasks


def get_storage_service(
    services: ServiceContainer = Depends(get_services),
) -> StorageService:
    return services.storage


def get_telemetry(
    services: ServiceContainer = Depends(get_services),
) -> TelemetryService:
    return services.telemetry
