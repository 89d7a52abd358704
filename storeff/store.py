"""
State store with named events and effect feedback.

The store is the single writer of its state. ``dispatch(event, payload)``
resolves ``event`` against the action table first, then the mutation table,
applies any new state, notifies subscribers, and schedules every returned
Effect on the running event loop. When an Effect settles, the store
dispatches the Effect's success or failure label with the outcome.

Example:
    >>> store = Store(
    ...     {"todos": []},
    ...     mutations={"todos": {"add": lambda s, todo: {"todos": [*s["todos"], todo]}}},
    ... )
    >>> store.dispatch("todos.add", "buy milk")
    >>> store.state
    {'todos': ['buy milk']}
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections import deque
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from storeff._validators import ensure_callable
from storeff.config import StoreConfig, load_config
from storeff.effect import Effect, settle
from storeff.errors import UnknownEventError, failure_value
from storeff.response import Response, normalize_response
from storeff.trace import (
    DispatchRecord,
    DispatchTrace,
    HandlerKind,
    SettleRecord,
    TraceEntry,
    log_dispatches,
    short_repr,
)
from storeff.tree import Branch, build_tree, resolve_event

logger = logging.getLogger(__name__)

Subscriber: TypeAlias = Callable[["Store"], None]
Observer: TypeAlias = Callable[[TraceEntry], None]
Unsubscribe: TypeAlias = Callable[[], None]
Table: TypeAlias = "Mapping[str, Any] | Branch | None"


class Store:
    """
    Holds application state plus the action and mutation tables.

    - ``dispatch`` is the only way to change ``state``.
    - ``subscribe`` registers callbacks run after every state replacement.
    - ``drain`` waits for every scheduled effect and its redispatches.

    Mutations are ``(state, payload) -> state``. Actions are
    ``(state, payload) -> {"state": ..., "effect": ..., "effects": [...]}``
    (or a :class:`~storeff.response.Response`), every key optional.
    """

    def __init__(
        self,
        state: Any = None,
        mutations: Table = None,
        actions: Table = None,
        *,
        config: StoreConfig | None = None,
    ) -> None:
        self._config = config or load_config()
        if self._config.copy_initial_state:
            state = copy.deepcopy(state)
        self._state = state
        self._mutations = build_tree(mutations)
        self._actions = build_tree(actions)
        self._subscribers: list[Subscriber] = []
        self._observers: list[Observer] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._errors: deque[Exception] = deque(maxlen=self._config.error_limit)
        self.trace = DispatchTrace(self._config.trace_limit)
        if self._config.log_dispatches:
            log_dispatches(self)

    def __repr__(self) -> str:
        return f"Store(state={short_repr(self._state)}, pending={self.pending})"

    @property
    def state(self) -> Any:
        return self._state

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def actions(self) -> Branch:
        return self._actions

    @property
    def mutations(self) -> Branch:
        return self._mutations

    @property
    def pending(self) -> int:
        """Number of effects scheduled but not yet settled and redispatched."""
        return len(self._pending)

    @property
    def errors(self) -> tuple[Exception, ...]:
        """Subscriber and redispatch errors not yet surfaced by :meth:`drain`.

        At most ``config.error_limit`` are kept, newest last.
        """
        return tuple(self._errors)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Call ``callback(store)`` after every state replacement."""
        ensure_callable(callback, name="callback")
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def notify(self) -> None:
        """Call every subscriber. A failing subscriber does not stop the rest.

        Its exception is logged and queued for :meth:`drain`.
        """
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as exc:
                logger.exception("Subscriber %r failed", callback)
                self._errors.append(exc)

    def observe(self, callback: Observer) -> Unsubscribe:
        """Receive every :class:`DispatchRecord` and :class:`SettleRecord`."""
        ensure_callable(callback, name="callback")
        self._observers.append(callback)

        def _unobserve() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return _unobserve

    def _emit(self, entry: TraceEntry) -> None:
        self.trace.append(entry)
        for callback in list(self._observers):
            callback(entry)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: str, payload: Any = None) -> None:
        """Run ``event`` and schedule any resulting effects.

        State is replaced and subscribers notified before this returns;
        effects settle later on the running event loop.

        Raises:
            UnknownEventError: ``event`` matches no action and no mutation.
        """
        kind, response = self._run_handler(event, payload)
        logger.debug("dispatch %s via %s", event, kind)

        state_changed = False
        scheduled: tuple[Effect, ...] = ()
        if response is not None:
            new_state = response.new_state
            if new_state.is_some():
                self._state = new_state.unwrap()
                state_changed = True
                self.notify()
            scheduled = response.scheduled
            for effect in scheduled:
                self._schedule(effect)

        if self.trace.enabled or self._observers:
            self._emit(
                DispatchRecord(
                    seq=self.trace.next_seq(),
                    event=event,
                    handler_kind=kind,
                    payload_repr=short_repr(payload),
                    state_changed=state_changed,
                    effect_count=len(scheduled),
                )
            )

    def _run_handler(
        self, event: str, payload: Any
    ) -> tuple[HandlerKind, Response | None]:
        action = resolve_event(self._actions, event)
        if action is not None:
            return "action", normalize_response(action(self._state, payload))
        mutation = resolve_event(self._mutations, event)
        if mutation is not None:
            return "mutation", Response(state=mutation(self._state, payload))
        raise UnknownEventError(event)

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _schedule(self, effect: Effect) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._settle(effect))
        self._pending.add(task)
        task.add_done_callback(self._on_settled)

    def _on_settled(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        logger.error("Redispatch after effect settlement failed: %r", error)
        if isinstance(error, Exception):
            self._errors.append(error)

    async def _settle(self, effect: Effect) -> None:
        result = await settle(effect, self)
        if result.is_ok():
            label, value = effect.success_label, result.unwrap()
            status = "resolved"
        else:
            label, value = effect.failure_label, failure_value(result.unwrap_err())
            status = "rejected"

        if self.trace.enabled or self._observers:
            self._emit(
                SettleRecord(
                    seq=self.trace.next_seq(),
                    status=status,
                    label=label,
                    value_repr=short_repr(value),
                )
            )

        if label is None:
            if status == "rejected":
                logger.warning("Effect rejected with no failure label: %r", value)
            else:
                logger.debug("Effect resolved with no success label, dropped")
            return
        self.dispatch(label, value)

    async def drain(self) -> None:
        """Wait until no effect is pending, including ones scheduled meanwhile.

        Raises:
            Exception: The oldest queued subscriber or redispatch error, once
                every pending effect has finished.
        """
        while self._pending:
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)
        if self._errors:
            error = self._errors.popleft()
            self._errors.clear()
            raise error


__all__ = ["Observer", "Store", "Subscriber", "Unsubscribe"]
