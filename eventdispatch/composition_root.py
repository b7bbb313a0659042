"""
Composition Root

Architectural Intent:
- Single place where configuration, logging, telemetry and the dispatcher
  are wired together
- Applications call create_container() once at startup

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Telemetry initialization is async, so create_container only builds the
  exporter; callers that configured an endpoint await initialize_telemetry()
"""

from dataclasses import dataclass
from typing import Any, Optional

from eventdispatch.infrastructure.config import EventDispatchConfig, load_config
from eventdispatch.infrastructure.event_dispatcher import EventDispatcher
from eventdispatch.infrastructure.logging import configure_logging
from eventdispatch.infrastructure.telemetry.otel_exporter import (
    OTELConfig,
    OTELExporter,
)


@dataclass
class EventDispatchContainer:
    """DI container holding all wired dependencies."""

    config: EventDispatchConfig
    telemetry: OTELExporter
    dispatcher: EventDispatcher

    async def initialize_telemetry(self) -> None:
        await self.telemetry.initialize()


def create_container(
    config: Optional[EventDispatchConfig] = None,
    config_path: Optional[str] = None,
    target: Optional[Any] = None,
) -> EventDispatchContainer:
    """Create and wire all dependencies."""
    if config is None:
        config = load_config(path=config_path)

    configure_logging(
        level=config.logging.level,
        json_format=config.logging.json_format,
    )

    telemetry = OTELExporter(
        OTELConfig(
            endpoint=config.telemetry.endpoint,
            service_name=config.telemetry.service_name,
            insecure=config.telemetry.insecure,
            buffer_size=config.telemetry.buffer_size,
        )
    )
    dispatcher = EventDispatcher(
        target=target, config=config.dispatch, telemetry=telemetry
    )

    return EventDispatchContainer(
        config=config,
        telemetry=telemetry,
        dispatcher=dispatcher,
    )
