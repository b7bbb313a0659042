"""
Listener Record Value Object

Architectural Intent:
- One registered subscription: a handler plus its normalized options
- Handlers are either plain callables or objects exposing ``handle_event``
- Two handlers are the same subscription iff they are the same object
"""

from __future__ import annotations
import inspect
from dataclasses import dataclass
from typing import Any

from eventdispatch.domain.exceptions import InvalidArgumentError
from eventdispatch.domain.value_objects.listener_options import ListenerOptions


def _is_valid_handler(handler: Any) -> bool:
    if callable(handler):
        return True
    return callable(getattr(handler, "handle_event", None))


def same_handler(a: Any, b: Any) -> bool:
    """Identity comparison; bound methods of one instance compare equal."""
    if a is b:
        return True
    # obj.method builds a new bound-method object on every access
    return inspect.ismethod(a) and inspect.ismethod(b) and a == b


@dataclass(frozen=True, eq=False)
class ListenerRecord:
    """
    Value Object representing one registered listener.
    """
    handler: Any
    options: ListenerOptions

    def __post_init__(self) -> None:
        if self.handler is None:
            raise InvalidArgumentError(
                "handler must be a callable or an object with handle_event()"
            )
        if not _is_valid_handler(self.handler):
            raise InvalidArgumentError(
                f"handler {self.handler!r} is not callable and has no handle_event()"
            )

    @property
    def use_capture(self) -> bool:
        return self.options.use_capture

    @property
    def priority(self) -> int:
        return self.options.priority

    @property
    def once(self) -> bool:
        return self.options.once

    def matches(self, handler: Any, use_capture: bool) -> bool:
        return self.options.use_capture is use_capture and same_handler(
            self.handler, handler
        )

    def invoke(self, event: Any) -> Any:
        if callable(self.handler):
            return self.handler(event)
        return self.handler.handle_event(event)

    def __repr__(self) -> str:
        return (
            f"ListenerRecord(handler={self.handler!r}, use_capture={self.use_capture}, "
            f"priority={self.priority}, once={self.once})"
        )
