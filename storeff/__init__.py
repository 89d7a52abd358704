"""
storeff - a state store driven by named events and composable effects.

Mutations describe pure state changes; actions return a new state plus
deferred :class:`Effect` values. When an effect settles, the store dispatches
its success or failure label with the outcome.

Example:
    >>> from storeff import Effect, Store
    >>>
    >>> def load(state, _):
    ...     return {"state": {**state, "loading": True},
    ...             "effect": Effect.success("loaded", ["a", "b"])}
    >>>
    >>> store = Store(
    ...     {"items": [], "loading": False},
    ...     mutations={"loaded": lambda state, items: {"items": items, "loading": False}},
    ...     actions={"load": load},
    ... )
    >>> store.dispatch("load")
    >>> await store.drain()
    >>> store.state
    {'items': ['a', 'b'], 'loading': False}
"""

from storeff._vendor import NOTHING, Err, FrozenDict, Maybe, Ok, Result, Some
from storeff.config import DEFAULT_CONFIG, StoreConfig, load_config
from storeff.effect import (
    AGGREGATION_MODES,
    BindStep,
    ChainStep,
    Effect,
    MapStep,
    Outcome,
    settle,
)
from storeff.errors import (
    AllEffectsFailed,
    EffectFailure,
    EffectNotRunnableError,
    StoreffError,
    UnknownEventError,
    failure_value,
)
from storeff.response import Response
from storeff.store import Store, Unsubscribe
from storeff.trace import DispatchRecord, DispatchTrace, SettleRecord, log_dispatches
from storeff.tree import Branch, Leaf, build_tree, lookup

__version__ = "0.1.0"

__all__ = [
    "AGGREGATION_MODES",
    "DEFAULT_CONFIG",
    "NOTHING",
    "AllEffectsFailed",
    "BindStep",
    "Branch",
    "ChainStep",
    "DispatchRecord",
    "DispatchTrace",
    "Effect",
    "EffectFailure",
    "EffectNotRunnableError",
    "Err",
    "FrozenDict",
    "Leaf",
    "MapStep",
    "Maybe",
    "Ok",
    "Outcome",
    "Response",
    "Result",
    "SettleRecord",
    "Some",
    "Store",
    "StoreConfig",
    "StoreffError",
    "UnknownEventError",
    "Unsubscribe",
    "build_tree",
    "failure_value",
    "load_config",
    "log_dispatches",
    "lookup",
    "settle",
]
