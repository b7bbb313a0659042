"""Global test configuration.

Shared fixtures for dispatcher tests.
"""

import logging

import pytest

from eventdispatch.infrastructure.event_dispatcher import EventDispatcher


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() calls so handlers never outlive a test."""
    logger = logging.getLogger("eventdispatch")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def calls():
    """Ordered record of listener invocations."""
    return []


@pytest.fixture
def recorder(calls):
    """Build a named listener that appends its name to ``calls``."""

    def make(name):
        def listener(event):
            calls.append(name)

        listener.__name__ = f"listener_{name}"
        return listener

    return make
