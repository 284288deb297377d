"""Tests for tracing setup from settings."""

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from pydantic import ValidationError

from tenantdesk.core.config import Settings
from tenantdesk.shared.telemetry.telemetry import Telemetry, _build_exporter


def test_exporter_choice() -> None:
    assert isinstance(_build_exporter(Settings(telemetry_exporter="console")), ConsoleSpanExporter)
    assert _build_exporter(Settings(telemetry_exporter="none")) is None
    otlp = Settings(telemetry_exporter="otlp", telemetry_otlp_endpoint="http://collector:4317")
    assert isinstance(_build_exporter(otlp), OTLPSpanExporter)


def test_otlp_requires_endpoint() -> None:
    with pytest.raises(ValidationError, match="TELEMETRY_OTLP_ENDPOINT"):
        Settings(telemetry_exporter="otlp", telemetry_otlp_endpoint=None)


def test_unknown_exporter_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(telemetry_exporter="jaeger")


def test_sample_rate_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(telemetry_sample_rate=1.5)


def test_resource_names_the_service() -> None:
    settings = Settings(telemetry_exporter="none", telemetry_environment="staging")
    telemetry = Telemetry.from_settings(settings)
    try:
        attributes = telemetry.provider.resource.attributes
        assert attributes["service.name"] == settings.app_name
        assert attributes["deployment.environment"] == "staging"
        assert telemetry.excluded_urls == "/api/v1/health"
    finally:
        telemetry.shutdown()
