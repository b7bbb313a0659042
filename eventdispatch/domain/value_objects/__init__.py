from eventdispatch.domain.value_objects.listener_options import (
    DEFAULT_OPTIONS,
    ListenerOptions,
    extract_use_capture,
    normalize_options,
)
from eventdispatch.domain.value_objects.listener_record import (
    ListenerRecord,
    same_handler,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "ListenerOptions",
    "ListenerRecord",
    "extract_use_capture",
    "normalize_options",
    "same_handler",
]
