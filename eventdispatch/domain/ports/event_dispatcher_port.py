"""
Event Dispatcher Port

Architectural Intent:
- Abstract interface for objects that register listeners and dispatch events
- Components that "have a" dispatcher can expose this contract without
  inheriting from the concrete EventDispatcher
"""

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable

from eventdispatch.domain.events.event_base import Event


@runtime_checkable
class EventListenerPort(Protocol):
    def handle_event(self, event: Event) -> Any: ...


@runtime_checkable
class EventDispatcherPort(Protocol):
    def add_event_listener(
        self, type: Hashable, handler: Any, options: Any = False
    ) -> None: ...

    def remove_event_listener(
        self, type: Hashable, handler: Any, use_capture: Any = False
    ) -> None: ...

    def has_event_listener(self, type: Hashable) -> bool: ...

    def dispatch_event(self, event: Event) -> bool: ...
