"""Standard data types, interface instances and builtin functions.

    data Maybe a    = Nothing | Just a
    data List a     = Nil | Cons a (List a)
    data Writer w a = Writer a w
    data Mempty     = Mempty

    instance Functor  Maybe, List, Writer
    instance Foldable Maybe, List, Writer
    instance Monad    Maybe, List, Writer
    instance Monoid   List, String, Mempty

``Mempty`` stands for the identity of whatever monoid it is later combined
with. ``pure`` for Writer cannot know its log type, so it starts the log at
``Mempty``; every monoid instance treats it as a two-sided identity.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from .config import Settings
from .errors import EvalError, TypeMismatchError
from .evaluator import Evaluator
from .interfaces import STANDARD_INTERFACES
from .registry import Instance, InstanceRegistry
from .show import show
from .types import ConstructorDecl, DataType, FieldDecl, TypeEnv, TypeRef
from .values import (
    MEMPTY,
    Builtin,
    Data,
    Thunk,
    is_mempty,
    iter_list,
    type_of,
    values_equal,
)

# =====================================================================
# Data types
# =====================================================================

MAYBE = DataType(
    name=TypeRef("Maybe"),
    params=("a",),
    constructors=(
        ConstructorDecl("Nothing"),
        ConstructorDecl("Just", (FieldDecl("value", "a"),)),
    ),
)

LIST = DataType(
    name=TypeRef("List"),
    params=("a",),
    constructors=(
        ConstructorDecl("Nil"),
        ConstructorDecl("Cons", (FieldDecl("head", "a"), FieldDecl("tail", "List a"))),
    ),
)

WRITER = DataType(
    name=TypeRef("Writer"),
    params=("w", "a"),
    constructors=(
        ConstructorDecl("Writer", (FieldDecl("value", "a"), FieldDecl("log", "w"))),
    ),
)

MEMPTY_TYPE = DataType(
    name=TypeRef("Mempty"),
    params=(),
    constructors=(ConstructorDecl("Mempty"),),
)

PRELUDE_TYPES: tuple[DataType, ...] = (MAYBE, LIST, WRITER, MEMPTY_TYPE)

NIL = Data("List", "Nil", ())
NOTHING = Data("Maybe", "Nothing", ())


# =====================================================================
# Host-side constructors
# =====================================================================


def just(x: Any) -> Data:
    return Data("Maybe", "Just", (x,))


def nothing() -> Data:
    return NOTHING


def writer(value: Any, log: Any = MEMPTY) -> Data:
    return Data("Writer", "Writer", (value, log))


def from_list(items: Iterable[Any], tail: Data = NIL) -> Data:
    """Build a Cons/Nil list from a Python iterable, ending in ``tail``."""
    result = tail
    for x in reversed(list(items)):
        result = Data("List", "Cons", (x, result))
    return result


def to_list(value: Any) -> list[Any]:
    return list(iter_list(value))


def _expect(value: Any, type_name: str, where: str) -> Data:
    if not isinstance(value, Data) or value.type_name != type_name:
        raise TypeMismatchError(f"{where}: expected {type_name}, got {type_of(value)} {show(value)}")
    return value


# =====================================================================
# Maybe
# =====================================================================


def _maybe_map(ev: Evaluator, f: Any, m: Any) -> Data:
    m = _expect(m, "Maybe", "map")
    if m.tag == "Nothing":
        return m
    return just(ev.force(ev.apply(f, m.args)))


def _maybe_foldr(ev: Evaluator, f: Any, z: Any, m: Any) -> Any:
    m = _expect(m, "Maybe", "foldr")
    if m.tag == "Nothing":
        return z
    return ev.apply(f, (m.args[0], z))


def _maybe_foldl(ev: Evaluator, f: Any, z: Any, m: Any) -> Any:
    m = _expect(m, "Maybe", "foldl")
    if m.tag == "Nothing":
        return z
    return ev.force(ev.apply(f, (z, m.args[0])))


def _maybe_pure(ev: Evaluator, x: Any) -> Data:
    return just(ev.force(x))


def _maybe_bind(ev: Evaluator, m: Any, f: Any) -> Data:
    m = _expect(m, "Maybe", "bind")
    if m.tag == "Nothing":
        return m
    return _expect(ev.force(ev.apply(f, m.args)), "Maybe", "bind")


# =====================================================================
# List
# =====================================================================


def _list_map(ev: Evaluator, f: Any, xs: Any) -> Data:
    return from_list([ev.force(ev.apply(f, (x,))) for x in iter_list(xs)])


def _list_foldr(ev: Evaluator, f: Any, z: Any, xs: Any) -> Any:
    """Right fold; the rest of the fold reaches ``f`` as an unforced thunk."""

    def step(node: Any) -> Any:
        match node:
            case Data(type_name="List", tag="Nil"):
                return z
            case Data(type_name="List", tag="Cons", args=(head, tail)):
                return ev.apply(f, (head, Thunk(lambda: step(tail))))
        raise TypeMismatchError(f"foldr: expected List, got {type_of(node)}")

    return step(xs)


def _list_foldl(ev: Evaluator, f: Any, z: Any, xs: Any) -> Any:
    acc = ev.force(z)
    for x in iter_list(xs):
        acc = ev.force(ev.apply(f, (acc, x)))
    return acc


def _list_pure(ev: Evaluator, x: Any) -> Data:
    return from_list([ev.force(x)])


def _list_bind(ev: Evaluator, xs: Any, f: Any) -> Data:
    out: list[Any] = []
    for x in iter_list(xs):
        ys = _expect(ev.force(ev.apply(f, (x,))), "List", "bind")
        out.extend(iter_list(ys))
    return from_list(out)


def _list_append(a: Data, b: Data) -> Data:
    return from_list(iter_list(a), tail=b)


# =====================================================================
# Writer
# =====================================================================


def _writer_map(ev: Evaluator, f: Any, w: Any) -> Data:
    value, log = _expect(w, "Writer", "map").args
    return writer(ev.force(ev.apply(f, (value,))), log)


def _writer_foldr(ev: Evaluator, f: Any, z: Any, w: Any) -> Any:
    value, _ = _expect(w, "Writer", "foldr").args
    return ev.apply(f, (value, z))


def _writer_foldl(ev: Evaluator, f: Any, z: Any, w: Any) -> Any:
    value, _ = _expect(w, "Writer", "foldl").args
    return ev.force(ev.apply(f, (z, value)))


def _writer_pure(ev: Evaluator, x: Any) -> Data:
    return writer(ev.force(x), MEMPTY)


def _writer_bind(ev: Evaluator, w: Any, f: Any) -> Data:
    value, log = _expect(w, "Writer", "bind").args
    result = _expect(ev.force(ev.apply(f, (value,))), "Writer", "bind")
    new_value, new_log = result.args
    return writer(new_value, ev.mappend(log, new_log))


# =====================================================================
# Monoids
# =====================================================================


def _monoid_append(type_name: str, combine: Callable[[Any, Any], Any]) -> Builtin:
    """``mappend`` for ``type_name`` with ``Mempty`` absorbed on either side."""

    def impl(ev: Evaluator, a: Any, b: Any) -> Any:
        a, b = ev.force(a), ev.force(b)
        if is_mempty(a):
            return b
        if is_mempty(b):
            return a
        if type_of(b) != type_name:
            raise TypeMismatchError(
                f"mappend: cannot combine {type_name} with {type_of(b)}"
            )
        return combine(a, b)

    return Builtin(f"mappend@{type_name}", 2, impl)


def _method(type_name: str, name: str, arity: int, impl: Callable[..., Any]) -> Builtin:
    return Builtin(f"{name}@{type_name}", arity, impl)


def _instances() -> list[Instance]:
    return [
        # Maybe
        Instance("Maybe", "Functor", {"map": _method("Maybe", "map", 2, _maybe_map)}),
        Instance("Maybe", "Foldable", {
            "foldr": _method("Maybe", "foldr", 3, _maybe_foldr),
            "foldl": _method("Maybe", "foldl", 3, _maybe_foldl),
        }),
        Instance("Maybe", "Monad", {
            "pure": _method("Maybe", "pure", 1, _maybe_pure),
            "bind": _method("Maybe", "bind", 2, _maybe_bind),
        }),
        # List
        Instance("List", "Functor", {"map": _method("List", "map", 2, _list_map)}),
        Instance("List", "Foldable", {
            "foldr": _method("List", "foldr", 3, _list_foldr),
            "foldl": _method("List", "foldl", 3, _list_foldl),
        }),
        Instance("List", "Monad", {
            "pure": _method("List", "pure", 1, _list_pure),
            "bind": _method("List", "bind", 2, _list_bind),
        }),
        Instance("List", "Monoid", {
            "mempty": NIL,
            "mappend": _monoid_append("List", _list_append),
        }),
        # Writer
        Instance("Writer", "Functor", {"map": _method("Writer", "map", 2, _writer_map)}),
        Instance("Writer", "Foldable", {
            "foldr": _method("Writer", "foldr", 3, _writer_foldr),
            "foldl": _method("Writer", "foldl", 3, _writer_foldl),
        }),
        Instance("Writer", "Monad", {
            "pure": _method("Writer", "pure", 1, _writer_pure),
            "bind": _method("Writer", "bind", 2, _writer_bind),
        }),
        # Primitive and polymorphic monoids
        Instance("String", "Monoid", {
            "mempty": "",
            "mappend": _monoid_append("String", lambda a, b: a + b),
        }),
        Instance("Mempty", "Monoid", {
            "mempty": MEMPTY,
            "mappend": _monoid_append("Mempty", lambda a, b: b),
        }),
    ]


# =====================================================================
# Builtin functions
# =====================================================================

BUILTINS: dict[str, Builtin] = {}


def builtin(name: str, arity: int, *, strict: bool = True) -> Callable[[Callable[..., Any]], Builtin]:
    """Register a host function under ``name``.

    Strict builtins receive forced arguments and no evaluator; lazy ones
    receive the evaluator and raw (possibly thunked) arguments.
    """

    def deco(fn: Callable[..., Any]) -> Builtin:
        if strict:
            def impl(ev: Evaluator, *args: Any) -> Any:
                return fn(*(ev.force(a) for a in args))
        else:
            impl = fn
        b = Builtin(name, arity, impl)
        BUILTINS[name] = b
        return b

    return deco


def _number(name: str, value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(f"{name}: expected a number, got {type_of(value)}")
    return value


def _boolean(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeMismatchError(f"{name}: expected Bool, got {type_of(value)}")
    return value


def _comparable(name: str, a: Any, b: Any) -> None:
    if type_of(a) != type_of(b) and not (
        isinstance(a, (int, float)) and isinstance(b, (int, float))
    ):
        raise TypeMismatchError(f"{name}: cannot compare {type_of(a)} with {type_of(b)}")
    if type_of(a) not in ("Int", "Float", "String"):
        raise TypeMismatchError(f"{name}: {type_of(a)} is not ordered")


@builtin("add", 2)
def _add(a: Any, b: Any) -> Any:
    return _number("add", a) + _number("add", b)


@builtin("sub", 2)
def _sub(a: Any, b: Any) -> Any:
    return _number("sub", a) - _number("sub", b)


@builtin("mul", 2)
def _mul(a: Any, b: Any) -> Any:
    return _number("mul", a) * _number("mul", b)


@builtin("div", 2)
def _div(a: Any, b: Any) -> Any:
    a, b = _number("div", a), _number("div", b)
    if b == 0:
        raise EvalError("div: division by zero")
    if isinstance(a, int) and isinstance(b, int):
        return a // b
    return a / b


@builtin("mod", 2)
def _mod(a: Any, b: Any) -> Any:
    a, b = _number("mod", a), _number("mod", b)
    if b == 0:
        raise EvalError("mod: division by zero")
    return a % b


@builtin("neg", 1)
def _neg(a: Any) -> Any:
    return -_number("neg", a)


@builtin("eq", 2, strict=False)
def _eq(ev: Evaluator, a: Any, b: Any) -> bool:
    return values_equal(ev.force_deep(a), ev.force_deep(b))


@builtin("ne", 2, strict=False)
def _ne(ev: Evaluator, a: Any, b: Any) -> bool:
    return not values_equal(ev.force_deep(a), ev.force_deep(b))


@builtin("lt", 2)
def _lt(a: Any, b: Any) -> bool:
    _comparable("lt", a, b)
    return a < b


@builtin("le", 2)
def _le(a: Any, b: Any) -> bool:
    _comparable("le", a, b)
    return a <= b


@builtin("gt", 2)
def _gt(a: Any, b: Any) -> bool:
    _comparable("gt", a, b)
    return a > b


@builtin("ge", 2)
def _ge(a: Any, b: Any) -> bool:
    _comparable("ge", a, b)
    return a >= b


@builtin("not", 1)
def _not(a: Any) -> bool:
    return not _boolean("not", a)


@builtin("and", 2)
def _and(a: Any, b: Any) -> bool:
    return _boolean("and", a) and _boolean("and", b)


@builtin("or", 2)
def _or(a: Any, b: Any) -> bool:
    return _boolean("or", a) or _boolean("or", b)


@builtin("concat", 2)
def _concat(a: Any, b: Any) -> str:
    if not isinstance(a, str) or not isinstance(b, str):
        raise TypeMismatchError(f"concat: expected String, got {type_of(a)} and {type_of(b)}")
    return a + b


@builtin("show", 1, strict=False)
def _show(ev: Evaluator, a: Any) -> str:
    return show(ev.force_deep(a))


@builtin("id", 1, strict=False)
def _id(ev: Evaluator, a: Any) -> Any:
    return a


@builtin("const", 2, strict=False)
def _const(ev: Evaluator, a: Any, b: Any) -> Any:
    return a


@builtin("flip", 3, strict=False)
def _flip(ev: Evaluator, f: Any, a: Any, b: Any) -> Any:
    return ev.apply(f, (b, a))


@builtin("compose", 3, strict=False)
def _compose(ev: Evaluator, f: Any, g: Any, x: Any) -> Any:
    return ev.apply(f, (ev.apply(g, (x,)),))


@builtin("tell", 1)
def _tell(w: Any) -> Data:
    return writer(None, w)


@builtin("length", 1, strict=False)
def _length(ev: Evaluator, t: Any) -> int:
    return ev.foldl(Builtin("count", 2, lambda _ev, n, _x: ev.force(n) + 1), 0, t)


# =====================================================================
# Defaults
# =====================================================================


def default_types() -> TypeEnv:
    return TypeEnv(PRELUDE_TYPES)


def default_registry() -> InstanceRegistry:
    registry = InstanceRegistry(STANDARD_INTERFACES)
    for inst in _instances():
        registry.register(inst)
    return registry


def default_evaluator(settings: Settings | None = None) -> Evaluator:
    """An evaluator over the prelude types, instances and builtins."""
    return Evaluator(default_types(), default_registry(), BUILTINS, settings)
