"""
Small sum types shared across storeff.

``Result`` carries the settled outcome of an effect, ``Maybe`` carries the
optional new state of an action response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Generic, NoReturn, TypeVar

from frozendict import frozendict

# =========================================================
# Type Vars
# =========================================================
T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Result(Generic[T_co]):
    """Sum type representing either a successful value or an error."""

    __slots__ = ()

    def is_ok(self) -> bool:
        """Return ``True`` when the result is successful."""

        return isinstance(self, Ok)

    def err(self) -> Exception | None:
        """Return the contained error, or ``None`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        return None

    def unwrap(self) -> T_co:
        """Return the value or raise the stored error."""

        if isinstance(self, Ok):
            return self.value
        raise self.error

    def unwrap_err(self) -> Exception:
        """Return the error or raise ``RuntimeError`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        raise RuntimeError("Called unwrap_err on Ok value")


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    """Success result."""
    value: T


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    """Error result."""
    error: Exception


class Maybe(Generic[T_co]):
    """Optional value that may contain ``Some`` data or ``Nothing``."""

    __slots__ = ()

    def is_some(self) -> bool:
        """Return ``True`` when the value is present."""

        return isinstance(self, Some)

    def unwrap(self) -> T_co:
        """Return the contained value or raise ``RuntimeError``."""

        if isinstance(self, Some):
            return self.value
        raise RuntimeError("Called unwrap on Nothing value")

    @classmethod
    def from_optional(cls, value: T_co | None) -> Maybe[T_co]:
        """Create a ``Maybe`` from an optional Python value."""

        if value is None:
            return NOTHING
        return Some(value)


@dataclass(frozen=True)
class Some(Maybe[T], Generic[T]):
    """Presence of a value."""

    value: T


class Nothing(Maybe[NoReturn]):
    """Singleton representing the absence of a value."""

    __slots__ = ()
    _instance: Nothing | None = None

    def __new__(cls) -> Nothing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Nothing()"


NOTHING: Final[Maybe[NoReturn]] = Nothing()

FrozenDict = frozendict

__all__ = [
    "NOTHING",
    "Err",
    "FrozenDict",
    "Maybe",
    "Nothing",
    "Ok",
    "Result",
    "Some",
]
