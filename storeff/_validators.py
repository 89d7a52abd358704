"""Runtime validators for effect and store arguments."""

from __future__ import annotations

from storeff.errors import EffectNotRunnableError


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_runnable(value: object) -> None:
    if not callable(value):
        raise EffectNotRunnableError(value)


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_optional_label(value: object, *, name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be str or None, got {_type_name(value)}")


def ensure_effect(value: object, *, name: str) -> None:
    from storeff.effect import Effect

    if not isinstance(value, Effect):
        raise TypeError(f"{name} must be Effect, got {_type_name(value)}")


__all__ = [
    "ensure_callable",
    "ensure_effect",
    "ensure_optional_label",
    "ensure_runnable",
]
