"""Result type for operations a caller is expected to probe rather than catch."""

from dataclasses import dataclass
from typing import TypeAlias, TypeVar, Generic

T = TypeVar("T")
E = TypeVar("E", bound=Exception)
V = TypeVar("V")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result: TypeAlias = Ok[T] | Err[E]


def unwrap(result: "Result[V, Exception]") -> V:
    """Return the Ok value or raise the wrapped error."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise error
    raise TypeError(f"Not a Result: {result!r}")
