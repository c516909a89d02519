"""Exceptions raised by hookadapter."""


class HookAdapterError(Exception):
    """Base exception for hookadapter errors."""

    pass


class HookConfigurationError(HookAdapterError):
    """Raised when a routing token or callback registry is misconfigured.

    Configuration errors are detected before any input is read and are never
    converted into a fail-open decision.
    """

    pass


class HookInputError(HookAdapterError):
    """Raised when an agent payload cannot be parsed into a HookEvent."""

    pass
