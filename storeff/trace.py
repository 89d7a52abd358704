"""Dispatch trace records and the loguru dispatch reporter."""

from __future__ import annotations

import itertools
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from loguru import logger as loguru_logger

if TYPE_CHECKING:
    from storeff.store import Store, Unsubscribe

HandlerKind: TypeAlias = Literal["action", "mutation"]
SettleStatus: TypeAlias = Literal["resolved", "rejected"]

loguru_logger = loguru_logger.bind(component="storeff.trace")

_REPR_LIMIT = 200


def short_repr(value: Any, limit: int = _REPR_LIMIT) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


@dataclass(frozen=True)
class DispatchRecord:
    seq: int
    event: str
    handler_kind: HandlerKind
    payload_repr: str
    state_changed: bool
    effect_count: int


@dataclass(frozen=True)
class SettleRecord:
    seq: int
    status: SettleStatus
    label: str | None
    value_repr: str

    @property
    def dropped(self) -> bool:
        """No label to redispatch to."""
        return self.label is None


TraceEntry: TypeAlias = DispatchRecord | SettleRecord


class DispatchTrace:
    """Bounded, in-memory history of dispatches and settlements."""

    def __init__(self, limit: int = 1000) -> None:
        self.limit = limit
        self._entries: deque[TraceEntry] = deque(maxlen=limit or None)
        self._seq = itertools.count(1)

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    def next_seq(self) -> int:
        return next(self._seq)

    def append(self, entry: TraceEntry) -> None:
        if self.enabled:
            self._entries.append(entry)

    def events(self) -> list[str]:
        """Dispatched event names, oldest first."""
        return [
            entry.event for entry in self._entries if isinstance(entry, DispatchRecord)
        ]

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[TraceEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


def report(entry: TraceEntry) -> None:
    match entry:
        case DispatchRecord():
            loguru_logger.debug(
                "#{} dispatch {} via {} payload={} state_changed={} effects={}",
                entry.seq,
                entry.event,
                entry.handler_kind,
                entry.payload_repr,
                entry.state_changed,
                entry.effect_count,
            )
        case SettleRecord(dropped=True):
            loguru_logger.debug(
                "#{} effect {} with no label, outcome dropped: {}",
                entry.seq,
                entry.status,
                entry.value_repr,
            )
        case SettleRecord():
            loguru_logger.debug(
                "#{} effect {} -> {} {}",
                entry.seq,
                entry.status,
                entry.label,
                entry.value_repr,
            )


def log_dispatches(
    store: Store,
    sink: Callable[[TraceEntry], None] = report,
) -> Unsubscribe:
    """Report every dispatch and settlement of ``store`` through loguru."""
    return store.observe(sink)


__all__ = [
    "DispatchRecord",
    "DispatchTrace",
    "HandlerKind",
    "SettleRecord",
    "SettleStatus",
    "TraceEntry",
    "log_dispatches",
    "report",
    "short_repr",
]
