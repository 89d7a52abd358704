"""
Exceptions raised by storeff.

All storeff-specific exceptions inherit from :class:`StoreffError`, so callers
can catch the library's errors without catching unrelated ones.
"""

from __future__ import annotations

from typing import Any


class StoreffError(Exception):
    """Base exception for all storeff errors."""

    pass


class UnknownEventError(StoreffError, LookupError):
    """Raised when ``dispatch`` gets an event matching neither table.

    Attributes:
        event: The event name that could not be resolved.
    """

    def __init__(self, event: Any) -> None:
        self.event = event
        super().__init__(f"{event} is not an action")


class EffectNotRunnableError(StoreffError, TypeError):
    """Raised when an Effect is built around something that is not callable."""

    def __init__(self, run: Any) -> None:
        self.run = run
        super().__init__(
            f"Effect run must be callable, got {type(run).__name__}"
        )


class EffectFailure(StoreffError):
    """Rejection carrying a value that is not itself an exception.

    ``Effect.fail("onError", 42)`` rejects with ``EffectFailure(42)``; the
    store unwraps it so the failure label is dispatched with ``42``.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(value)

    def __repr__(self) -> str:
        return f"EffectFailure({self.value!r})"


class AllEffectsFailed(StoreffError):
    """Raised by ``Effect.all(..., mode="collect")`` when any member failed.

    Attributes:
        failures: Failure payloads keyed by each member's failure label, or by
            its position when the member has no failure label.
    """

    def __init__(self, failures: dict[Any, Any]) -> None:
        self.failures = failures
        keys = ", ".join(repr(key) for key in failures)
        super().__init__(f"{len(failures)} effect(s) failed: {keys}")


def failure_value(error: BaseException) -> Any:
    """Return the payload a failure label should be dispatched with."""
    if isinstance(error, EffectFailure):
        return error.value
    return error


def as_exception(value: Any) -> Exception:
    """Wrap ``value`` in :class:`EffectFailure` unless it already is an exception."""
    if isinstance(value, Exception):
        return value
    return EffectFailure(value)


__all__ = [
    "AllEffectsFailed",
    "EffectFailure",
    "EffectNotRunnableError",
    "StoreffError",
    "UnknownEventError",
    "as_exception",
    "failure_value",
]
