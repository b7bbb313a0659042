"""
eventdispatch

In-process event dispatching with priority-ordered listeners and a
capture/bubble phase split modelled on the DOM event contract.
"""

from eventdispatch.domain.events.event_base import Event, EventPhase
from eventdispatch.domain.exceptions import InvalidArgumentError
from eventdispatch.domain.ports.event_dispatcher_port import (
    EventDispatcherPort,
    EventListenerPort,
)
from eventdispatch.domain.value_objects.listener_options import ListenerOptions
from eventdispatch.domain.value_objects.listener_record import ListenerRecord
from eventdispatch.infrastructure.event_dispatcher import EventDispatcher

__version__ = "1.0.0"

__all__ = [
    "Event",
    "EventDispatcher",
    "EventDispatcherPort",
    "EventListenerPort",
    "EventPhase",
    "InvalidArgumentError",
    "ListenerOptions",
    "ListenerRecord",
]
