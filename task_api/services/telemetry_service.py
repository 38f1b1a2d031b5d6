"""
Best-effort telemetry through OpenTelemetry.

Nothing in here may raise into a request handler: every public method
catches its own failures and logs them at debug level. Exporting happens
on the SDK's background processors, so recording never waits on the
network.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
    OTLPMetricExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)


def _attributes(properties: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Coerce properties into values OpenTelemetry accepts as attributes."""
    attributes = {}
    for key, value in (properties or {}).items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            attributes[key] = value
        else:
            attributes[key] = str(value)
    return attributes


class TelemetryService:
    """Emit events, metrics and exceptions when an OTLP endpoint is set.

    Args:
        endpoint: Base OTLP/HTTP endpoint; telemetry is disabled when None
        resource_attributes: Extra resource attributes (service name, ...)
        span_processor: Overrides the batching OTLP span processor
        metric_reader: Overrides the periodic OTLP metric reader
    """

    def __init__(
        self,
        endpoint: Optional[str],
        resource_attributes: Optional[Mapping[str, Any]] = None,
        span_processor: Optional[SpanProcessor] = None,
        metric_reader: Optional[MetricReader] = None,
    ):
        self.is_configured = False
        self._tracer_provider = None
        self._meter_provider = None
        self._histograms = {}

        if not endpoint:
            logger.info(
                "Telemetry not configured - missing OTEL_EXPORTER_OTLP_ENDPOINT"
            )
            return

        base = endpoint.rstrip("/")
        try:
            resource = Resource.create(_attributes(resource_attributes))
            self._tracer_provider = TracerProvider(resource=resource)
            self._tracer_provider.add_span_processor(
                span_processor
                or BatchSpanProcessor(
                    OTLPSpanExporter(endpoint=f"{base}/v1/traces")
                )
            )
            reader = metric_reader or PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=f"{base}/v1/metrics")
            )
            self._meter_provider = MeterProvider(
                resource=resource, metric_readers=[reader]
            )
            self._tracer = self._tracer_provider.get_tracer(__name__)
            self._meter = self._meter_provider.get_meter(__name__)
        except Exception as e:
            logger.error("Error initializing telemetry: %s", e)
            return

        self.is_configured = True
        logger.info("Telemetry initialized (endpoint: %s)", base)

    def track_event(
        self, name: str, properties: Optional[Mapping[str, Any]] = None
    ) -> None:
        if not self.is_configured:
            return
        try:
            attributes = _attributes(properties)
            with self._tracer.start_as_current_span(
                name, attributes=attributes
            ) as span:
                span.add_event(name, attributes=attributes)
        except Exception as e:
            logger.debug("Dropping telemetry event %s: %s", name, e)

    def track_metric(
        self,
        name: str,
        value: float,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not self.is_configured:
            return
        try:
            histogram = self._histograms.get(name)
            if histogram is None:
                histogram = self._meter.create_histogram(name)
                self._histograms[name] = histogram
            histogram.record(value, attributes=_attributes(properties))
        except Exception as e:
            logger.debug("Dropping telemetry metric %s: %s", name, e)

    def track_exception(
        self,
        error: BaseException,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not self.is_configured:
            return
        try:
            with self._tracer.start_as_current_span(
                "Exception", attributes=_attributes(properties)
            ) as span:
                span.record_exception(error)
                span.set_status(Status(StatusCode.ERROR, str(error)))
        except Exception as e:
            logger.debug("Dropping telemetry exception: %s", e)

    def instrument_app(self, app: Any) -> None:
        """Trace every incoming request of a FastAPI app."""
        if not self.is_configured:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self._tracer_provider,
                meter_provider=self._meter_provider,
            )
        except Exception as e:
            logger.warning("Request instrumentation unavailable: %s", e)

    def shutdown(self) -> None:
        """Flush pending telemetry and stop the exporters."""
        for provider in (self._tracer_provider, self._meter_provider):
            if provider is None:
                continue
            try:
                provider.shutdown()
            except Exception as e:
                logger.debug("Error shutting down telemetry: %s", e)
