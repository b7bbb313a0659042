"""
Domain Exceptions

Architectural Intent:
- Errors raised synchronously by the listener registry
- These are programmer errors (bad arguments), never transient conditions
"""


class InvalidArgumentError(ValueError):
    """Raised when a registry operation receives an unusable argument."""
