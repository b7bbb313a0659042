"""
Domain Events Package

Architectural Intent:
- Contains the event payload consumed by the dispatcher
"""

from eventdispatch.domain.events.event_base import Event, EventPhase

__all__ = [
    "Event",
    "EventPhase",
]
