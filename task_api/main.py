import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_api.api.api import api_router
from task_api.core.config import Settings, settings as default_settings
from task_api.core.exceptions import (
    AppError,
    DatabaseError,
    NotConfiguredError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from task_api.core.logging_config import setup_logging
from task_api.services import ServiceContainer, build_services

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
ERROR_RESPONSES = (
    (
        NotConfiguredError,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Service unavailable",
    ),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Validation error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not found"),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error"),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage error"),
    (AppError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def _report_failure(
    request: Request, exc: Exception, status_code: int
) -> None:
    """Send a failed request to telemetry; never raises."""
    services: Optional[ServiceContainer] = getattr(
        request.app.state, "services", None
    )
    if services is None:
        return
    properties = {
        "method": request.method,
        "path": request.url.path,
        "statusCode": status_code,
        "error": type(exc).__name__,
    }
    services.telemetry.track_event("RequestFailed", properties)
    if status_code >= 500:
        services.telemetry.track_exception(exc, properties)


def register_exception_handlers(app: FastAPI) -> None:
    """Convert every error into the JSON error envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        for exc_type, status_code, error in ERROR_RESPONSES:
            if isinstance(exc, exc_type):
                break
        if status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc
            )
        _report_failure(request, exc, status_code)
        return error_response(status_code, error, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        message = "; ".join(
            "{}: {}".format(
                ".".join(str(part) for part in err.get("loc", ())),
                err.get("msg", "invalid value"),
            )
            for err in exc.errors()
        )
        _report_failure(request, exc, status.HTTP_400_BAD_REQUEST)
        return error_response(
            status.HTTP_400_BAD_REQUEST, "Validation error", message
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        _report_failure(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc),
        )


def prepare_database(services: ServiceContainer) -> None:
    """Check the database connection and create the tasks table.

    Failures are logged so the API still starts and reports them per
    request.
    """
    if not services.tasks.is_configured:
        return
    services.tasks.check_connection()
    try:
        services.tasks.initialize_schema()
    except DatabaseError as e:
        logger.error("Could not initialize database schema: %s", e)


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Factory to create FastAPI app instance."""
    settings = settings or default_settings
    if not settings.TESTING:
        setup_logging()
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown logic."""
        prepare_database(services)
        logger.info(
            "Cloud Task API %s started (%s)",
            settings.API_VERSION,
            settings.ENVIRONMENT,
        )
        yield
        services.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        description="Task CRUD, file uploads and telemetry",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                str(origin) for origin in settings.BACKEND_CORS_ORIGINS
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    services.telemetry.instrument_app(app)

    # Mount API routers
    app.include_router(api_router, prefix=settings.API_PREFIX)

    def features() -> dict:
        return {
            "database": services.tasks.is_configured,
            "storage": services.storage.is_configured,
            "monitoring": services.telemetry.is_configured,
        }

    @app.get("/")
    def root() -> dict:
        return {
            "message": "Cloud Task API",
            "version": settings.API_VERSION,
            "environment": settings.ENVIRONMENT,
            "endpoints": [
                "/api/health",
                "/api/tasks",
                "/api/db/tasks",
                "/api/upload",
                "/api/files",
            ],
            "features": features(),
        }

    @app.get(f"{settings.API_PREFIX}/health")
    def health_check() -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.ENVIRONMENT,
            "version": settings.API_VERSION,
            **features(),
        }

    return app


app = create_app()
