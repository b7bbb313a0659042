"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for dispatchers and listeners
- Follows Hexagonal Architecture principles
"""

from eventdispatch.domain.ports.event_dispatcher_port import (
    EventDispatcherPort,
    EventListenerPort,
)

__all__ = [
    "EventDispatcherPort",
    "EventListenerPort",
]
