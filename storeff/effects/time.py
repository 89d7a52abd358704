"""Timer effects."""

from __future__ import annotations

import asyncio
from typing import Any

from storeff.effect import Effect


def _ensure_seconds(seconds: float) -> float:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise TypeError(f"seconds must be a number, got {type(seconds).__name__}")
    if seconds < 0:
        raise ValueError(f"seconds must be >= 0, got {seconds}")
    return float(seconds)


def delay(
    seconds: float,
    value: Any = None,
    success_label: str | None = None,
    failure_label: str | None = None,
) -> Effect:
    """Resolve with ``value`` after ``seconds``."""
    wait = _ensure_seconds(seconds)

    async def _sleep(store: Any) -> Any:
        await asyncio.sleep(wait)
        return value

    return Effect(_sleep, success_label=success_label, failure_label=failure_label)


def after(seconds: float, effect: Effect) -> Effect:
    """Run ``effect`` once ``seconds`` have passed, keeping its labels."""
    return delay(
        seconds,
        success_label=effect.success_label,
        failure_label=effect.failure_label,
    ).then(lambda _: effect)


__all__ = ["after", "delay"]
