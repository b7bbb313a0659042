"""
eventdispatch Telemetry Infrastructure

Architectural Intent:
- OpenTelemetry integration for dispatch metrics
"""

from eventdispatch.infrastructure.telemetry.otel_exporter import (
    OTELExporter,
    OTELConfig,
    create_exporter,
)

__all__ = [
    "OTELExporter",
    "OTELConfig",
    "create_exporter",
]
