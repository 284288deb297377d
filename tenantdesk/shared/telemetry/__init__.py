"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from tenantdesk.shared.telemetry.logging import setup_logging
from tenantdesk.shared.telemetry.telemetry import (
    Telemetry,
    get_telemetry,
    set_telemetry,
)
from tenantdesk.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "setup_logging",
    "Telemetry",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
    "add_span_event",
]
