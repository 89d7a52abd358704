"""
Namespaced lookup tables for actions and mutations.

Tables are nested string-keyed mappings whose leaves are callables. An event
name such as ``"todos.items.add"`` walks ``todos`` then ``items`` and returns
the callable stored under ``add``.

``build_tree`` freezes a user mapping into ``Leaf``/``Branch`` nodes so that the
"not found" and "found but not callable" cases are explicit.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from storeff._vendor import FrozenDict

EVENT_SEPARATOR = "."


@dataclass(frozen=True)
class Leaf:
    """A callable at the end of a path."""

    fn: Callable[..., Any]


@dataclass(frozen=True)
class Branch:
    """A sub-table keyed by path segment."""

    children: FrozenDict[str, Node]


@dataclass(frozen=True)
class Opaque:
    """A value that is neither callable nor a table; never resolvable."""

    value: Any


Node: TypeAlias = Leaf | Branch | Opaque

EMPTY = Branch(FrozenDict())


def build_tree(table: Mapping[str, Any] | Branch | None) -> Branch:
    """Freeze a nested mapping of callables into a :class:`Branch`."""
    if table is None:
        return EMPTY
    if isinstance(table, Branch):
        return table
    if not isinstance(table, Mapping):
        raise TypeError(f"table must be a mapping, got {type(table).__name__}")
    return Branch(FrozenDict({str(key): _to_node(value) for key, value in table.items()}))


def _to_node(value: Any) -> Node:
    if isinstance(value, (Leaf, Branch, Opaque)):
        return value
    if isinstance(value, Mapping):
        return build_tree(value)
    if callable(value):
        return Leaf(value)
    return Opaque(value)


def split_event(name: str) -> tuple[str, ...]:
    return tuple(name.split(EVENT_SEPARATOR))


def lookup(node: Node, path: Sequence[str]) -> Callable[..., Any] | None:
    """Return the callable at ``path`` under ``node``, or ``None``.

    An empty path, a missing segment, or a path that ends on anything other
    than a callable all mean "not found".
    """
    if not path:
        return None
    if not isinstance(node, Branch):
        return None
    head, tail = path[0], path[1:]
    child = node.children.get(head)
    if child is None:
        return None
    if not tail and isinstance(child, Leaf):
        return child.fn
    return lookup(child, tail)


def resolve_event(tree: Branch, event: str) -> Callable[..., Any] | None:
    if not isinstance(event, str) or not event:
        return None
    return lookup(tree, split_event(event))


__all__ = [
    "EMPTY",
    "EVENT_SEPARATOR",
    "Branch",
    "Leaf",
    "Node",
    "Opaque",
    "build_tree",
    "lookup",
    "resolve_event",
    "split_event",
]
