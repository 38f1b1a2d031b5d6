"""Pytest configuration and fixtures for testing."""

from typing import Callable, Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)

from task_api.core.config import Settings
from task_api.main import create_app
from task_api.services import (
    DatabaseTaskService,
    SampleTaskService,
    ServiceContainer,
    StorageService,
    TelemetryService,
)

TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_S3_ENDPOINT = "https://s3.test.local"
TEST_OTLP_ENDPOINT = "http://otel.test.local:4318"

ENV_VARS = (
    "DATABASE_URL",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_S3_REGION_NAME",
    "AWS_S3_ENDPOINT_URL",
    "STORAGE_BUCKET_NAME",
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "OTEL_SERVICE_NAME",
    "API_VERSION",
    "ENVIRONMENT",
    "MAX_TASKS",
    "PORT",
    "HOST",
    "BACKEND_CORS_ORIGINS",
)


@pytest.fixture
def make_settings(monkeypatch) -> Callable[..., Settings]:
    """Build ``Settings`` from a clean environment plus the given values."""

    def _make(**env: str) -> Settings:
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("TESTING", "True")
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Settings()

    return _make


@pytest.fixture
def configured_settings(make_settings) -> Settings:
    return make_settings(
        DATABASE_URL=TEST_DATABASE_URL,
        AWS_ACCESS_KEY_ID="test-key",
        AWS_SECRET_ACCESS_KEY="test-secret",
        OTEL_EXPORTER_OTLP_ENDPOINT=TEST_OTLP_ENDPOINT,
        ENVIRONMENT="test",
        API_VERSION="9.9.9",
    )


@pytest.fixture
def task_service() -> Generator[DatabaseTaskService, None, None]:
    """A persistent task store on an in-memory SQLite database."""
    service = DatabaseTaskService(TEST_DATABASE_URL)
    service.initialize_schema()
    yield service
    service.close()


@pytest.fixture
def s3_client() -> MagicMock:
    """A stand-in for the boto3 S3 client."""
    client = MagicMock()
    client.meta.endpoint_url = TEST_S3_ENDPOINT
    return client


@pytest.fixture
def storage_service(configured_settings, s3_client) -> StorageService:
    return StorageService(configured_settings, client=s3_client)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def telemetry(span_exporter, metric_reader) -> TelemetryService:
    """Telemetry recording into in-memory exporters."""
    service = TelemetryService(
        TEST_OTLP_ENDPOINT,
        resource_attributes={"service.name": "cloud-task-api-test"},
        span_processor=SimpleSpanProcessor(span_exporter),
        metric_reader=metric_reader,
    )
    # Request auto-instrumentation would add a span per HTTP call.
    with patch.object(service, "instrument_app"):
        yield service


@pytest.fixture
def services(
    configured_settings, task_service, storage_service, telemetry
) -> ServiceContainer:
    return ServiceContainer(
        sample_tasks=SampleTaskService(configured_settings.MAX_TASKS),
        tasks=task_service,
        storage=storage_service,
        telemetry=telemetry,
    )


@pytest.fixture
def client(configured_settings, services) -> Generator[TestClient, None, None]:
    """A test client with every backing service configured."""
    app = create_app(settings=configured_settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client(
    configured_settings, services
) -> Generator[TestClient, None, None]:
    """Like ``client`` but unexpected errors come back as 500 responses."""
    app = create_app(settings=configured_settings, services=services)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client(make_settings) -> Generator[TestClient, None, None]:
    """A test client started without any backing-service credentials."""
    app = create_app(settings=make_settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def span_names(span_exporter) -> Callable[[], list]:
    """Names of the spans recorded so far."""
    return lambda: [span.name for span in span_exporter.get_finished_spans()]


@pytest.fixture
def metric_names(metric_reader) -> Callable[[], list]:
    """Names of the metrics collected so far."""

    def _names() -> list:
        data = metric_reader.get_metrics_data()
        if data is None:
            return []
        return [
            metric.name
            for resource_metrics in data.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
        ]

    return _names
