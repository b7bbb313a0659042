"""
Event Dispatcher

Architectural Intent:
- Owns, per event type, a priority-ordered sequence of ListenerRecords
- Delivers events synchronously: capture listeners first, then bubble listeners
- Registry mutations made while a dispatch iterates a type's sequence go to a
  fresh copy (copy-on-write), so the running dispatch sees a stable snapshot

Design Decisions:
- Each type has a "locked" flag set for the duration of a dispatch; the first
  mutation that sees it clones the sequence and clears the flag
- The flag is released in a finally block so a failing listener never leaves
  it set; a nested dispatch of the same type leaves the outer lock alone
- Awaitables returned by listeners are scheduled as fire-and-forget tasks
"""

from __future__ import annotations
from collections.abc import Hashable
from typing import Any, Awaitable, Optional
import asyncio
import inspect
import logging
import time

from eventdispatch.domain.events.event_base import Event, EventPhase
from eventdispatch.domain.exceptions import InvalidArgumentError
from eventdispatch.domain.value_objects.listener_options import (
    OptionsLike,
    extract_use_capture,
    normalize_options,
)
from eventdispatch.domain.value_objects.listener_record import ListenerRecord
from eventdispatch.infrastructure.config import DispatchConfig
from eventdispatch.infrastructure.telemetry.otel_exporter import OTELExporter

logger = logging.getLogger(__name__)

_PHASES = (
    (EventPhase.CAPTURING_PHASE, True),
    (EventPhase.AT_TARGET, False),
)


def _is_type_key(type: Any) -> bool:
    if type is None:
        return False
    try:
        hash(type)
    except TypeError:
        return False
    return True


def _propagation_stopped(event: Any) -> bool:
    return bool(
        getattr(event, "propagation_stopped", False)
        or getattr(event, "immediate_propagation_stopped", False)
    )


class EventDispatcher:
    """
    Listener registry and dispatcher for a single event target.

    ``target`` is the identity the dispatcher presents to listeners as
    ``event.target`` / ``event.current_target``; it defaults to the
    dispatcher itself and lets a component that owns a dispatcher appear as
    the event source.
    """

    def __init__(
        self,
        target: Optional[Any] = None,
        config: Optional[DispatchConfig] = None,
        telemetry: Optional[OTELExporter] = None,
    ) -> None:
        self._target_dispatcher = target if target is not None else self
        self._config = config or DispatchConfig()
        self._telemetry = telemetry
        self._listener_register: dict[Hashable, list[ListenerRecord]] = {}
        self._listener_lockers: dict[Hashable, bool] = {}
        self._pending_tasks: set[asyncio.Future] = set()

    @property
    def target(self) -> Any:
        return self._target_dispatcher

    @property
    def config(self) -> DispatchConfig:
        return self._config

    @property
    def pending_tasks(self) -> int:
        return len(self._pending_tasks)

    def _copy_on_write(self, type: Hashable) -> None:
        """Detach the live sequence from an in-flight dispatch before mutating it."""
        if self._listener_lockers.get(type):
            self._listener_lockers[type] = False
            self._listener_register[type] = list(self._listener_register[type])
            logger.debug("Cloned listener sequence for %r during dispatch", type)

    def _drop_if_empty(self, type: Hashable) -> None:
        if not self._listener_register.get(type):
            self._listener_register.pop(type, None)
            self._listener_lockers.pop(type, None)

    def add_event_listener(
        self, type: Hashable, handler: Any, options: OptionsLike = False
    ) -> None:
        """Register ``handler`` for ``type``.

        ``options`` is either a bool (``use_capture``), a ListenerOptions or a
        mapping with ``use_capture``/``priority``/``once``. Registering the same
        ``(handler, use_capture)`` pair again replaces the earlier record.

        Raises:
            InvalidArgumentError: handler is None or not invocable, type is not
                hashable, or options are malformed.
        """
        if handler is None:
            raise InvalidArgumentError(
                "handler must be a callable or an object with handle_event()"
            )
        if not _is_type_key(type):
            raise InvalidArgumentError(f"Event type must be hashable, got {type!r}")

        record = ListenerRecord(handler, normalize_options(options))

        self._copy_on_write(type)
        self.remove_event_listener(type, handler, record.use_capture)

        items = self._listener_register.get(type)
        if not items:
            self._listener_register[type] = [record]
        elif items[-1].priority >= record.priority:
            # Most listeners use the default priority, so appending is the common case.
            items.append(record)
        else:
            insert_at = len(items) - 1
            while insert_at >= 0 and items[insert_at].priority < record.priority:
                insert_at -= 1
            items.insert(insert_at + 1, record)

        logger.debug("Registered %r", record)

    def remove_event_listener(
        self, type: Hashable, handler: Any, use_capture: OptionsLike = False
    ) -> None:
        """Remove the listener registered with this exact ``(handler, use_capture)``.

        A capture registration is never removed by a bubble removal request and
        vice versa. Unknown listeners are ignored.
        """
        if not self.has_event_listener(type):
            return

        capture = extract_use_capture(use_capture)
        self._copy_on_write(type)

        items = self._listener_register[type]
        for index, record in enumerate(items):
            if record.matches(handler, capture):
                del items[index]
                logger.debug("Removed %r", record)
                break

        self._drop_if_empty(type)

    def _discard_record(self, type: Hashable, record: ListenerRecord) -> bool:
        """Remove this exact record if it is still registered."""
        items = self._listener_register.get(type)
        if not items or not any(r is record for r in items):
            return False
        self._copy_on_write(type)
        items = self._listener_register[type]
        items[:] = [r for r in items if r is not record]
        self._drop_if_empty(type)
        return True

    def remove_all_event_listeners(self, type: Optional[Hashable] = None) -> None:
        """Drop every listener for ``type``, or for all types when omitted."""
        if type is None:
            self._listener_register = {}
            self._listener_lockers = {}
            return
        if _is_type_key(type):
            self._listener_register.pop(type, None)
            self._listener_lockers.pop(type, None)

    def has_event_listener(self, type: Hashable) -> bool:
        if not _is_type_key(type):
            return False
        return bool(self._listener_register.get(type))

    def listener_count(self, type: Hashable) -> int:
        if not _is_type_key(type):
            return 0
        return len(self._listener_register.get(type, ()))

    def dispatch_event(self, event: Event) -> bool:
        """Deliver ``event`` to the listeners registered for ``event.type``.

        Capture listeners run first, then bubble listeners, each group in
        priority/registration order. Delivery stops as soon as a listener stops
        propagation on the event.

        Returns:
            False if a listener prevented the event's default action, else True.
        """
        if event is None or not _is_type_key(getattr(event, "type", None)):
            raise InvalidArgumentError(f"Cannot dispatch {event!r}: no event type")

        event_type = event.type
        if getattr(event, "target", None) is None:
            event.target = self._target_dispatcher
        event.current_target = self._target_dispatcher

        items = self._listener_register.get(event_type)
        if not items:
            event.current_target = None
            return not getattr(event, "default_prevented", False)

        was_locked = self._listener_lockers.get(event_type, False)
        self._listener_lockers[event_type] = True
        invoked = 0
        started = time.perf_counter()
        try:
            for phase, use_capture in _PHASES:
                if _propagation_stopped(event):
                    break
                event.event_phase = phase
                for record in items:
                    if record.use_capture != use_capture:
                        continue
                    if _propagation_stopped(event):
                        break
                    if record.once and not self._discard_record(event_type, record):
                        continue
                    invoked += 1
                    self._invoke(record, event)
        finally:
            if not was_locked:
                self._listener_lockers.pop(event_type, None)
            event.event_phase = EventPhase.NONE
            event.current_target = None
            if self._telemetry is not None:
                self._telemetry.record_dispatch(
                    event_type,
                    invoked,
                    (time.perf_counter() - started) * 1000.0,
                    getattr(event, "default_prevented", False),
                )

        return not getattr(event, "default_prevented", False)

    def _invoke(self, record: ListenerRecord, event: Event) -> None:
        try:
            result = record.invoke(event)
        except Exception as exc:
            if self._telemetry is not None:
                self._telemetry.record_listener_error(event.type, type(exc).__name__)
            if self._config.error_policy == "propagate":
                raise
            logger.exception(
                "Listener %r failed for event type %r", record.handler, event.type
            )
            return

        if inspect.isawaitable(result):
            self._schedule(result, event.type)

    def _schedule(self, awaitable: Awaitable[Any], event_type: Hashable) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Async listener for %r returned an awaitable outside a running "
                "event loop; discarding it",
                event_type,
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = asyncio.ensure_future(awaitable)
        self._pending_tasks.add(task)
        task.add_done_callback(lambda t: self._on_task_done(t, event_type))

    def _on_task_done(self, task: asyncio.Future, event_type: Hashable) -> None:
        self._pending_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Async listener failed for event type %r: %s",
                event_type,
                exc,
                exc_info=exc,
            )
            if self._telemetry is not None:
                self._telemetry.record_listener_error(event_type, type(exc).__name__)

    async def drain(self) -> None:
        """Wait for every async listener task scheduled so far."""
        while self._pending_tasks:
            await asyncio.gather(*list(self._pending_tasks), return_exceptions=True)
