"""End-to-end dispatch flow through the composition root."""

import enum

from eventdispatch import Event, EventDispatcher, ListenerOptions
from eventdispatch.composition_root import create_container
from eventdispatch.infrastructure.config import (
    DispatchConfig,
    EventDispatchConfig,
)


class FormEvent(enum.Enum):
    SUBMIT = "submit"
    RESET = "reset"


class Form:
    """Component that has a dispatcher but presents itself as the target."""

    def __init__(self):
        self.events = EventDispatcher(target=self)
        self.submitted = 0
        self.events.add_event_listener(FormEvent.SUBMIT, self.on_submit)

    def on_submit(self, event):
        self.submitted += 1

    def submit(self):
        return self.events.dispatch_event(Event(FormEvent.SUBMIT, cancelable=True))


class TestFormFlow:
    def test_validation_listener_cancels_submit(self):
        form = Form()
        audit = []

        def validator(event):
            audit.append(("validate", event.target is form))
            event.prevent_default()
            event.stop_propagation()

        form.events.add_event_listener(
            FormEvent.SUBMIT, validator, ListenerOptions(use_capture=True, priority=10)
        )

        assert form.submit() is False
        assert form.submitted == 0
        assert audit == [("validate", True)]

        form.events.remove_event_listener(FormEvent.SUBMIT, validator, True)
        assert form.submit() is True
        assert form.submitted == 1

    def test_bound_method_removal(self):
        form = Form()
        form.events.remove_event_listener(FormEvent.SUBMIT, form.on_submit)
        assert form.events.has_event_listener(FormEvent.SUBMIT) is False

    def test_once_reset_listener(self):
        form = Form()
        resets = []
        form.events.add_event_listener(
            FormEvent.RESET, lambda e: resets.append(e.type), {"once": True}
        )
        form.events.dispatch_event(Event(FormEvent.RESET))
        form.events.dispatch_event(Event(FormEvent.RESET))
        assert resets == [FormEvent.RESET]


class TestContainerFlow:
    def test_log_policy_survives_broken_listener(self):
        container = create_container(
            config=EventDispatchConfig(dispatch=DispatchConfig(error_policy="log"))
        )
        dispatcher = container.dispatcher
        delivered = []

        def broken(event):
            raise RuntimeError("listener bug")

        dispatcher.add_event_listener("tick", broken, {"priority": 1})
        dispatcher.add_event_listener("tick", lambda e: delivered.append(e.type))

        assert dispatcher.dispatch_event(Event("tick")) is True
        assert delivered == ["tick"]

        names = [m["name"] for m in container.telemetry._metrics_buffer]
        assert "eventdispatch.listener.errors" in names
        assert "eventdispatch.dispatch.duration_ms" in names
