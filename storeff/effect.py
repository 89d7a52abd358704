"""
Deferred, composable effects.

An :class:`Effect` wraps an asynchronous ``run(store)`` callable together with
optional success/failure labels. ``map`` and ``then`` never execute anything:
they return a new Effect whose chain is one step longer. The chain is only
walked when the Effect is resolved.

Example:
    >>> fetch_user = Effect(
    ...     load_user, success_label="userLoaded", failure_label="loadFailed"
    ... )
    >>> greeting = fetch_user.map(lambda user: user["name"]).then(
    ...     lambda name: Effect.success("greeted", f"hello {name}")
    ... )
    >>> await greeting.resolve(store)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any, Literal, TypeAlias

from storeff._validators import (
    ensure_callable,
    ensure_effect,
    ensure_optional_label,
    ensure_runnable,
)
from storeff._vendor import Err, Ok, Result
from storeff.errors import AllEffectsFailed, as_exception, failure_value

logger = logging.getLogger(__name__)

Run: TypeAlias = Callable[[Any], "Awaitable[Any] | Any"]
AggregationMode: TypeAlias = Literal["first", "collect"]
AGGREGATION_MODES: tuple[AggregationMode, ...] = ("first", "collect")


@dataclass(frozen=True)
class MapStep:
    """Synchronous transform of the running value."""

    fn: Callable[[Any], Any]
    kind: Literal["map"] = "map"


@dataclass(frozen=True)
class BindStep:
    """Hands the running value to ``fn``, which must return the next Effect."""

    fn: Callable[[Any], "Effect"]
    kind: Literal["then"] = "then"


ChainStep: TypeAlias = MapStep | BindStep


@dataclass(frozen=True, eq=False)
class Effect:
    """A deferred computation with optional success/failure routing labels.

    Attributes:
        run: ``(store) -> awaitable`` producing the initial value. A plain
            return value is treated as already resolved.
        success_label: Event dispatched with the resolved value.
        failure_label: Event dispatched with the rejection payload.
        chain: ``MapStep``/``BindStep`` applied left to right after ``run``.
    """

    run: Run
    success_label: str | None = None
    failure_label: str | None = None
    chain: tuple[ChainStep, ...] = ()

    def __post_init__(self) -> None:
        ensure_runnable(self.run)
        ensure_optional_label(self.success_label, name="success_label")
        ensure_optional_label(self.failure_label, name="failure_label")
        object.__setattr__(self, "chain", tuple(self.chain))

    def map(self, fn: Callable[[Any], Any]) -> Effect:
        ensure_callable(fn, name="mapper")
        return replace(self, chain=(*self.chain, MapStep(fn)))

    def then(self, fn: Callable[[Any], Effect]) -> Effect:
        ensure_callable(fn, name="binder")
        return replace(self, chain=(*self.chain, BindStep(fn)))

    def with_labels(
        self,
        success_label: str | None = None,
        failure_label: str | None = None,
    ) -> Effect:
        """Return a copy routed to different labels, keeping run and chain."""
        return replace(
            self, success_label=success_label, failure_label=failure_label
        )

    async def resolve(self, store: Any = None) -> Any:
        """Run the effect and apply its chain.

        A ``BindStep`` runs the Effect it produces against the same store and
        splices that Effect's own chain in front of the remaining steps.
        """
        value = await _invoke(self.run, store)
        steps = deque(self.chain)
        while steps:
            step = steps.popleft()
            if isinstance(step, MapStep):
                value = step.fn(value)
                continue
            next_effect = step.fn(value)
            if not isinstance(next_effect, Effect):
                raise TypeError(
                    f"then() callback must return Effect, got {type(next_effect).__name__}"
                )
            value = await _invoke(next_effect.run, store)
            steps.extendleft(reversed(next_effect.chain))
        return value

    @staticmethod
    def success(label: str | None, value: Any = None) -> Effect:
        """An Effect that resolves immediately with ``value``."""

        async def _succeed(store: Any) -> Any:
            return value

        return Effect(_succeed, success_label=label)

    @staticmethod
    def fail(label: str | None, value: Any = None) -> Effect:
        """An Effect that rejects immediately with ``value``."""

        async def _reject(store: Any) -> Any:
            raise as_exception(value)

        return Effect(_reject, failure_label=label)

    @staticmethod
    def all(
        effects: Iterable[Effect],
        *,
        success_label: str | None = None,
        failure_label: str | None = None,
        mode: AggregationMode = "first",
    ) -> Effect:
        """Resolve every member concurrently and combine the outcomes.

        ``mode="first"`` resolves with the ordered list of values, or rejects
        with the first failure in input order. ``mode="collect"`` resolves with
        a dict keyed by success label, or rejects with :class:`AllEffectsFailed`
        holding every failure keyed by failure label.
        """
        members = tuple(effects)
        for index, member in enumerate(members):
            ensure_effect(member, name=f"effects[{index}]")
        if mode not in AGGREGATION_MODES:
            raise ValueError(
                f"mode must be one of {AGGREGATION_MODES}, got {mode!r}"
            )
        aggregate = _first_failure if mode == "first" else _collect_failures

        async def _run_all(store: Any) -> Any:
            outcomes = await asyncio.gather(
                *(
                    _settle_member(index, member, store)
                    for index, member in enumerate(members)
                )
            )
            return aggregate(outcomes)

        return Effect(
            _run_all, success_label=success_label, failure_label=failure_label
        )


@dataclass(frozen=True)
class Outcome:
    """Settled result of one ``Effect.all`` member."""

    index: int
    label: str | None
    result: Result[Any]

    @property
    def ok(self) -> bool:
        return self.result.is_ok()

    @property
    def content(self) -> Any:
        if self.result.is_ok():
            return self.result.unwrap()
        return failure_value(self.result.unwrap_err())

    @property
    def key(self) -> Any:
        return self.label if self.label is not None else self.index


async def settle(effect: Effect, store: Any = None) -> Result[Any]:
    """Resolve ``effect`` and capture the outcome instead of raising."""
    try:
        value = await effect.resolve(store)
    except Exception as exc:
        return Err(exc)
    return Ok(value)


async def _invoke(run: Run, store: Any) -> Any:
    value = run(store)
    if inspect.isawaitable(value):
        value = await value
    return value


async def _settle_member(index: int, effect: Effect, store: Any) -> Outcome:
    result = await settle(effect, store)
    if result.is_ok():
        return Outcome(index=index, label=effect.success_label, result=result)
    logger.debug("Effect.all member %d failed: %r", index, result.err())
    return Outcome(index=index, label=effect.failure_label, result=result)


def _first_failure(outcomes: list[Outcome]) -> list[Any]:
    for outcome in outcomes:
        if not outcome.ok:
            raise outcome.result.unwrap_err()
    return [outcome.content for outcome in outcomes]


def _collect_failures(outcomes: list[Outcome]) -> dict[Any, Any]:
    successes: dict[Any, Any] = {}
    failures: dict[Any, Any] = {}
    for outcome in outcomes:
        bucket = successes if outcome.ok else failures
        bucket[outcome.key] = outcome.content
    if failures:
        raise AllEffectsFailed(failures)
    return successes


__all__ = [
    "AGGREGATION_MODES",
    "AggregationMode",
    "BindStep",
    "ChainStep",
    "Effect",
    "MapStep",
    "Outcome",
    "settle",
]
