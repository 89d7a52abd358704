"""Normalisation of action return values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from storeff._validators import ensure_effect
from storeff._vendor import Maybe
from storeff.effect import Effect

RESPONSE_KEYS = frozenset({"state", "effect", "effects"})


@dataclass(frozen=True)
class Response:
    """What an action asks the store to do.

    Actions may return this directly or a plain mapping with the same keys.
    ``state=None`` leaves the store's state untouched.
    """

    state: Any = None
    effect: Effect | None = None
    effects: tuple[Effect, ...] = ()

    def __post_init__(self) -> None:
        if self.effect is not None:
            ensure_effect(self.effect, name="effect")
        object.__setattr__(self, "effects", _as_effects(self.effects))

    @property
    def new_state(self) -> Maybe[Any]:
        return Maybe.from_optional(self.state)

    @property
    def scheduled(self) -> tuple[Effect, ...]:
        """Every effect to settle, ``effect`` first."""
        if self.effect is None:
            return self.effects
        return (self.effect, *self.effects)


def _as_effects(value: Any) -> tuple[Effect, ...]:
    if value is None:
        return ()
    if isinstance(value, Effect):
        return (value,)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(
            f"effects must be a sequence of Effect, got {type(value).__name__}"
        )
    for index, effect in enumerate(value):
        ensure_effect(effect, name=f"effects[{index}]")
    return tuple(value)


def normalize_response(raw: Any) -> Response | None:
    """Turn an action's return value into a :class:`Response`.

    Falsy values mean "nothing to do" and yield ``None``.
    """
    if not raw:
        return None
    if isinstance(raw, Response):
        return raw
    if isinstance(raw, Mapping):
        unknown = set(raw) - RESPONSE_KEYS
        if unknown:
            raise TypeError(
                f"Unknown action response keys: {sorted(map(str, unknown))}"
            )
        return Response(
            state=raw.get("state"),
            effect=raw.get("effect"),
            effects=raw.get("effects"),
        )
    raise TypeError(
        f"Action must return a mapping or Response, got {type(raw).__name__}"
    )


__all__ = ["RESPONSE_KEYS", "Response", "normalize_response"]
