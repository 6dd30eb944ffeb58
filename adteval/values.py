"""Runtime values produced by the evaluator.

Primitive values are plain Python objects:

    Int     int
    Float   float
    String  str
    Bool    bool
    Unit    None

Everything else is one of the dataclasses below. `type_of` gives the name an
instance is looked up under.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import TypeMismatchError

# ---------------------------------------------------------------------------
# Constructed data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Data:
    """A value built by a data constructor.

    Example: Just 3 → Data("Maybe", "Just", (3,))
    """

    type_name: str
    tag: str
    args: tuple[Any, ...] = ()


MEMPTY = Data("Mempty", "Mempty", ())


def is_mempty(value: object) -> bool:
    return isinstance(value, Data) and value.type_name == "Mempty"


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Closure:
    """A lambda paired with the environment it was created in."""

    params: tuple[str, ...]
    body: Any
    env: Mapping[str, Any]
    name: str | None = None

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(frozen=True, eq=False)
class Builtin:
    """A host function. ``impl`` receives the evaluator followed by the arguments."""

    name: str
    arity: int
    impl: Callable[..., Any]


@dataclass(frozen=True, eq=False)
class Partial:
    """A closure or builtin applied to fewer arguments than its arity."""

    fn: Closure | Builtin
    args: tuple[Any, ...]

    @property
    def remaining(self) -> int:
        return self.fn.arity - len(self.args)


# ---------------------------------------------------------------------------
# Suspended computations
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Thunk:
    """A memoised suspended computation. `force` runs it at most once."""

    compute: Callable[[], Any]
    _value: Any = field(default=None, repr=False)
    _forced: bool = field(default=False, repr=False)

    @property
    def is_forced(self) -> bool:
        return self._forced

    def force(self) -> Any:
        if not self._forced:
            self._value = self.compute()
            self._forced = True
            # release the closure so long fold chains can be collected
            self.compute = _forced_marker
        return self._value


def _forced_marker() -> Any:
    raise RuntimeError("thunk already forced")


# ---------------------------------------------------------------------------
# Dispatch tags
# ---------------------------------------------------------------------------


def type_of(value: object) -> str:
    """The type name an interface instance is resolved under."""
    match value:
        case Data(type_name=name):
            return name
        # bool before int: bool is a subclass of int
        case bool():
            return "Bool"
        case int():
            return "Int"
        case float():
            return "Float"
        case str():
            return "String"
        case None:
            return "Unit"
        case Closure() | Builtin() | Partial():
            return "Function"
        case Thunk():
            return "Thunk"
        case _ if callable(value):
            return "Function"
    return type(value).__name__


def is_callable_value(value: object) -> bool:
    return isinstance(value, (Closure, Builtin, Partial)) or (
        callable(value) and not isinstance(value, (Data, Thunk))
    )


def _numeric(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(a: object, b: object) -> bool:
    """Structural equality of forced values.

    Unlike ``==`` this keeps ``Bool`` apart from ``Int`` (``1`` is not
    ``True``) at every depth. ``Int`` and ``Float`` compare by value.
    Functions are equal only to themselves.
    """
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if isinstance(x, Data) or isinstance(y, Data):
            if not (isinstance(x, Data) and isinstance(y, Data)):
                return False
            if (x.type_name, x.tag, len(x.args)) != (y.type_name, y.tag, len(y.args)):
                return False
            stack.extend(zip(x.args, y.args))
        elif _numeric(x) and _numeric(y):
            if x != y:
                return False
        elif type_of(x) != type_of(y):
            return False
        elif type_of(x) == "Function":
            if x is not y:
                return False
        elif x != y:
            return False
    return True


# ---------------------------------------------------------------------------
# List spines
# ---------------------------------------------------------------------------


def iter_list(value: object) -> Iterator[Any]:
    """Yield the elements of a Cons/Nil list without recursing."""
    node = value
    while True:
        match node:
            case Data(type_name="List", tag="Cons", args=(head, tail)):
                yield head
                node = tail
            case Data(type_name="List", tag="Nil"):
                return
            case _:
                raise TypeMismatchError(f"Expected a List, got {type_of(node)}")
