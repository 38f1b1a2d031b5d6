"""Services package initialization.

Services are built once per process by ``build_services`` and handed to
the application factory, which stores them on ``app.state``.
"""

from dataclasses import dataclass
from typing import Optional

from task_api.core.config import Settings
from task_api.services.sample_task_service import SampleTaskService
from task_api.services.storage_service import StorageService
from task_api.services.task_service import DatabaseTaskService
from task_api.services.telemetry_service import TelemetryService


@dataclass
class ServiceContainer:
    """Every backing service the API routes talk to."""

    sample_tasks: SampleTaskService
    tasks: DatabaseTaskService
    storage: StorageService
    telemetry: TelemetryService

    def close(self) -> None:
        """Release pooled connections and flush telemetry."""
        self.tasks.close()
        self.telemetry.shutdown()


def build_services(
    settings: Settings, telemetry: Optional[TelemetryService] = None
) -> ServiceContainer:
    """Construct every service from ``settings``."""
    return ServiceContainer(
        sample_tasks=SampleTaskService(max_tasks=settings.MAX_TASKS),
        tasks=DatabaseTaskService(settings.DATABASE_URL),
        storage=StorageService(settings),
        telemetry=telemetry
        or TelemetryService(
            settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            resource_attributes={
                "service.name": settings.OTEL_SERVICE_NAME,
                "service.version": settings.API_VERSION,
                "deployment.environment": settings.ENVIRONMENT,
            },
        ),
    )


__all__ = [
    "ServiceContainer",
    "build_services",
    "DatabaseTaskService",
    "SampleTaskService",
    "StorageService",
    "TelemetryService",
]
