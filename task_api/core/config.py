import os
from typing import List, Optional

DEFAULT_MAX_TASKS = 10


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "t")


def _env_int(name: str, default: int) -> int:
    """Read a positive integer, falling back to ``default`` when unusable."""
    try:
        value = int(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def _env_optional(name: str) -> Optional[str]:
    """Treat empty strings the same as unset variables."""
    return os.getenv(name) or None


class Settings:
    """Environment-driven settings.

    Every optional subsystem (database, object storage, telemetry) is
    toggled by the presence of its credential. Values are read when the
    instance is created, so tests can patch the environment and build a
    fresh ``Settings()``.
    """

    PROJECT_NAME: str = "Cloud Task API"
    API_PREFIX: str = "/api"

    def __init__(self) -> None:
        self.TESTING: bool = _env_bool("TESTING")

        self.API_VERSION: str = os.getenv("API_VERSION", "1.0.0")
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.MAX_TASKS: int = _env_int("MAX_TASKS", DEFAULT_MAX_TASKS)

        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = _env_int("PORT", 3000)

        # Database
        self.DATABASE_URL: Optional[str] = _env_optional("DATABASE_URL")

        # Object storage (S3 compatible)
        self.AWS_ACCESS_KEY_ID: Optional[str] = _env_optional(
            "AWS_ACCESS_KEY_ID"
        )
        self.AWS_SECRET_ACCESS_KEY: Optional[str] = _env_optional(
            "AWS_SECRET_ACCESS_KEY"
        )
        self.AWS_S3_REGION_NAME: str = os.getenv(
            "AWS_S3_REGION_NAME", "us-east-1"
        )
        self.AWS_S3_ENDPOINT_URL: Optional[str] = _env_optional(
            "AWS_S3_ENDPOINT_URL"
        )
        self.STORAGE_BUCKET_NAME: str = os.getenv(
            "STORAGE_BUCKET_NAME", "task-api-uploads"
        )

        # Telemetry
        self.OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = _env_optional(
            "OTEL_EXPORTER_OTLP_ENDPOINT"
        )
        self.OTEL_SERVICE_NAME: str = os.getenv(
            "OTEL_SERVICE_NAME", "cloud-task-api"
        )

        # CORS
        origins = os.getenv("BACKEND_CORS_ORIGINS")
        self.BACKEND_CORS_ORIGINS: List[str] = (
            [origin.strip() for origin in origins.split(",") if origin.strip()]
            if origins is not None
            else [
                "http://localhost",
                "http://localhost:3000",
                "http://localhost:8000",
            ]
        )

    @property
    def database_configured(self) -> bool:
        return self.DATABASE_URL is not None

    @property
    def storage_configured(self) -> bool:
        return bool(self.AWS_ACCESS_KEY_ID and self.AWS_SECRET_ACCESS_KEY)

    @property
    def telemetry_configured(self) -> bool:
        return self.OTEL_EXPORTER_OTLP_ENDPOINT is not None


settings = Settings()
