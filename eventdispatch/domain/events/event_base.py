"""
Event Module

Architectural Intent:
- Event is the payload delivered by an EventDispatcher to its listeners
- Carries the mutable propagation/default-action state listeners write to
- The dispatcher only reads that state; it never decides cancellation itself
"""

from __future__ import annotations
from collections.abc import Hashable
from datetime import datetime, UTC
from enum import IntEnum
from typing import Any, Optional

from eventdispatch.domain.exceptions import InvalidArgumentError


class EventPhase(IntEnum):
    NONE = 0
    CAPTURING_PHASE = 1
    AT_TARGET = 2
    BUBBLING_PHASE = 3


class Event:
    """
    A single occurrence delivered to the listeners registered for ``type``.

    ``type`` may be any hashable identifier: a string, an Enum member or a
    sentinel object.
    """

    def __init__(
        self, type: Hashable, bubbles: bool = False, cancelable: bool = False
    ) -> None:
        if type is None:
            raise InvalidArgumentError("Event type must not be None")
        try:
            hash(type)
        except TypeError:
            raise InvalidArgumentError(f"Event type must be hashable, got {type!r}") from None
        self._type = type
        self._bubbles = bubbles
        self._cancelable = cancelable
        self._timestamp = datetime.now(UTC).isoformat()
        self.target: Optional[Any] = None
        self.current_target: Optional[Any] = None
        self.event_phase = EventPhase.NONE
        self._default_prevented = False
        self._propagation_stopped = False
        self._immediate_propagation_stopped = False

    @property
    def type(self) -> Hashable:
        return self._type

    @property
    def bubbles(self) -> bool:
        return self._bubbles

    @property
    def cancelable(self) -> bool:
        return self._cancelable

    @property
    def timestamp(self) -> str:
        return self._timestamp

    @property
    def default_prevented(self) -> bool:
        return self._default_prevented

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped

    @property
    def immediate_propagation_stopped(self) -> bool:
        return self._immediate_propagation_stopped

    def prevent_default(self) -> None:
        """Cancel the default action. Ignored for non-cancelable events."""
        if self._cancelable:
            self._default_prevented = True

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    def stop_immediate_propagation(self) -> None:
        self._propagation_stopped = True
        self._immediate_propagation_stopped = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self._type),
            "bubbles": self._bubbles,
            "cancelable": self._cancelable,
            "default_prevented": self._default_prevented,
            "timestamp": self._timestamp,
            "event_class": self.__class__.__name__,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(type={self._type!r}, "
            f"bubbles={self._bubbles}, cancelable={self._cancelable})"
        )
