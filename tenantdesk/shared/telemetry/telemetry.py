"""OpenTelemetry tracing for the tenantdesk API process.

Built once at startup from Settings (TELEMETRY_* variables). Spans carry the
service name, version and deployment environment; health checks are not
traced. The SQLAlchemy engine is created lazily, so database.py instruments
it through get_telemetry() when it is first built.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from tenantdesk.core.config import Settings

logger = logging.getLogger(__name__)


def _build_exporter(settings: Settings) -> SpanExporter | None:
    if settings.telemetry_exporter == "otlp":
        endpoint = settings.telemetry_otlp_endpoint or ""
        return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    if settings.telemetry_exporter == "console":
        return ConsoleSpanExporter()
    return None


class Telemetry:
    """Tracer provider plus the instrumentations tenantdesk uses."""

    def __init__(self, provider: TracerProvider, excluded_urls: str) -> None:
        self.provider = provider
        self.excluded_urls = excluded_urls

    @classmethod
    def from_settings(cls, settings: Settings) -> "Telemetry":
        """Create the provider and install it as the global tracer provider."""
        resource = Resource(
            attributes={
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: settings.app_version,
                "deployment.environment": settings.telemetry_environment,
            }
        )
        provider = TracerProvider(
            resource=resource,
            sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_rate)),
        )
        exporter = _build_exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        logger.info(
            "Tracing started: service=%s env=%s exporter=%s sample_rate=%s",
            settings.app_name,
            settings.telemetry_environment,
            settings.telemetry_exporter,
            settings.telemetry_sample_rate,
        )
        return cls(provider, settings.telemetry_excluded_urls)

    def instrument_app(self, app: FastAPI, *, redis: bool) -> None:
        """Trace requests and attach trace ids to log records; Redis commands when enabled."""
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.provider, excluded_urls=self.excluded_urls
        )
        LoggingInstrumentor().instrument(tracer_provider=self.provider, set_logging_format=True)
        if redis:
            RedisInstrumentor().instrument(tracer_provider=self.provider)

    def instrument_engine(self, engine: AsyncEngine) -> None:
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine, tracer_provider=self.provider
        )

    def shutdown(self) -> None:
        """Flush buffered spans. Export errors are logged, not raised."""
        try:
            self.provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)


_telemetry: Telemetry | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> Telemetry | None:
    """Return the process-wide instance, or None when tracing is off."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: Telemetry | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
