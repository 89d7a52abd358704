"""Store configuration.

Defaults live in ``DEFAULT_CONFIG`` under ``store.*`` keys. Environment
variables (``STOREFF_TRACE_LIMIT`` etc.) override the defaults, and explicit
overrides passed to :func:`load_config` win over both.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CONFIG_KEY_PREFIX = "store."
ENV_PREFIX = "STOREFF_"

DEFAULT_CONFIG: dict[str, Any] = {
    "store.trace_limit": 1000,
    "store.log_dispatches": False,
    "store.copy_initial_state": False,
    "store.error_limit": 100,
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class StoreConfig:
    """Resolved configuration for a :class:`~storeff.store.Store`.

    Attributes:
        trace_limit: Max records kept in ``store.trace``; ``0`` disables tracing.
        log_dispatches: Attach the loguru dispatch reporter at construction.
        copy_initial_state: Deep-copy the initial state handed to the store.
        error_limit: Max undrained errors kept in ``store.errors``; older ones
            are discarded first.
    """

    trace_limit: int = 1000
    log_dispatches: bool = False
    copy_initial_state: bool = False
    error_limit: int = 100

    def __post_init__(self) -> None:
        if self.trace_limit < 0:
            raise ValueError(f"trace_limit must be >= 0, got {self.trace_limit}")
        if self.error_limit < 1:
            raise ValueError(f"error_limit must be >= 1, got {self.error_limit}")


def env_key(key: str) -> str:
    """Map ``store.trace_limit`` to ``STOREFF_TRACE_LIMIT``."""
    return ENV_PREFIX + key[len(CONFIG_KEY_PREFIX):].upper()


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{key} expects a boolean, got {raw!r}")


def _parse_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"{key} expects an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} expects an integer, got {raw!r}") from exc


def _coerce(key: str, raw: Any) -> Any:
    default = DEFAULT_CONFIG[key]
    if isinstance(default, bool):
        return _parse_bool(key, raw)
    return _parse_int(key, raw)


def load_config(
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> StoreConfig:
    """Build a :class:`StoreConfig` from defaults, environment and overrides.

    Args:
        overrides: ``store.*`` keys overriding everything else.
        env: Environment to read; defaults to ``os.environ``.

    Raises:
        KeyError: An override key is not a known ``store.*`` key.
        ValueError: A value cannot be parsed for its key.
    """
    environ = os.environ if env is None else env
    config = dict(DEFAULT_CONFIG)

    for key in DEFAULT_CONFIG:
        name = env_key(key)
        if name in environ:
            config[key] = _coerce(key, environ[name])

    for key, value in (overrides or {}).items():
        if key not in DEFAULT_CONFIG:
            raise KeyError(f"Unknown store config key: {key!r}")
        config[key] = _coerce(key, value)

    return StoreConfig(
        trace_limit=config["store.trace_limit"],
        log_dispatches=config["store.log_dispatches"],
        copy_initial_state=config["store.copy_initial_state"],
        error_limit=config["store.error_limit"],
    )


__all__ = [
    "CONFIG_KEY_PREFIX",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "StoreConfig",
    "env_key",
    "load_config",
]
