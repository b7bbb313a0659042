"""
Listener Options Value Object

Architectural Intent:
- Immutable options attached to every registered listener
- A bare bool is shorthand for ``use_capture``; it is normalized once at the
  API boundary so registry logic only ever sees ListenerOptions
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from eventdispatch.domain.exceptions import InvalidArgumentError

OptionsLike = Union[bool, "ListenerOptions", Mapping[str, Any], None]

# camelCase spellings accepted from mapping input
_KEY_ALIASES = {
    "useCapture": "use_capture",
    "use_capture": "use_capture",
    "priority": "priority",
    "once": "once",
}


@dataclass(frozen=True)
class ListenerOptions:
    """
    Value Object holding per-listener delivery options.
    Higher ``priority`` values are delivered earlier.
    """
    use_capture: bool = False
    priority: int = 0
    once: bool = False

    def __post_init__(self) -> None:
        for name in ("use_capture", "once"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidArgumentError(f"{name} must be a bool, got {value!r}")
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise InvalidArgumentError(
                f"priority must be an int, got {self.priority!r}"
            )


DEFAULT_OPTIONS = ListenerOptions()


def _from_mapping(data: Mapping[str, Any]) -> ListenerOptions:
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(key)
        if name is None:
            raise InvalidArgumentError(f"Unknown listener option: {key!r}")
        kwargs[name] = value
    return ListenerOptions(**kwargs)


def normalize_options(options: OptionsLike = False) -> ListenerOptions:
    """Map any accepted options form onto a ListenerOptions."""
    if options is None or options is False:
        return DEFAULT_OPTIONS
    if options is True:
        return ListenerOptions(use_capture=True)
    if isinstance(options, ListenerOptions):
        return options
    if isinstance(options, Mapping):
        return _from_mapping(options)
    raise InvalidArgumentError(
        f"options must be a bool, ListenerOptions or mapping, got {type(options).__name__}"
    )


def extract_use_capture(selector: Any = False) -> Any:
    """Return the capture flag from a removal selector, defaulting to False.

    The value is returned as given; a non-bool flag matches no registration.
    """
    if selector is None:
        return False
    if isinstance(selector, bool):
        return selector
    if isinstance(selector, Mapping):
        return selector.get("use_capture", selector.get("useCapture", False))
    return getattr(selector, "use_capture", False)
