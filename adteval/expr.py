"""Expression AST.

An expression is built from:
  - Variables and literals
  - Lambdas and application (curried)
  - Constructor application (Just(x), Cons(x, xs))
  - Interface method invocation (map, bind, foldr, ...), dispatched at runtime
  - let / let rec, if, and pattern matching on constructors

There is no surface syntax; programs are built with `adteval.helpers` or
loaded from JSON (`adteval.serialization`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Var:
    """A reference to a bound name.

    Example: x → Var("x")
    """

    name: str


@dataclass(frozen=True)
class Lit:
    """A primitive literal: int, float, str, bool or None (unit).

    Example: 42 → Lit(42)
    """

    value: Any


@dataclass(frozen=True)
class Lam:
    """An anonymous function.

    Example: \\x y -> add x y → Lam(("x", "y"), App(Var("add"), (Var("x"), Var("y"))))
    """

    params: tuple[str, ...]
    body: Expr


@dataclass(frozen=True)
class App:
    """Application of a function expression to arguments.

    Example: add 1 2 → App(Var("add"), (Lit(1), Lit(2)))
    """

    fn: Expr
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class Construct:
    """Saturated application of a data constructor.

    Example: Just 3   → Construct("Just", (Lit(3),))
    Example: Nothing  → Construct("Nothing", ())
    """

    tag: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Invoke:
    """Invocation of an interface method, resolved through the registry.

    The instance is chosen by the runtime type of the method's dispatch
    argument, or by ``type_hint`` when given.

    Example: map f (Just 3)  → Invoke("map", (Var("f"), Construct("Just", (Lit(3),))))
    Example: pure 1 :: List  → Invoke("pure", (Lit(1),), type_hint="List")
    """

    method: str
    args: tuple[Expr, ...]
    type_hint: str | None = None


@dataclass(frozen=True)
class Let:
    """Local binding. With ``recursive=True`` the value can refer to its own name.

    Example: let x = 1 in add x x
    """

    name: str
    value: Expr
    body: Expr
    recursive: bool = False


@dataclass(frozen=True)
class If:
    """Conditional; only the chosen branch is evaluated."""

    cond: Expr
    then: Expr
    orelse: Expr


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PCon:
    """Match a constructor and bind its fields positionally.

    Use "_" as a binder to ignore a field.
    """

    tag: str
    binders: tuple[str, ...] = ()


@dataclass(frozen=True)
class PVar:
    """Match anything and bind it."""

    name: str


@dataclass(frozen=True)
class PWild:
    """Match anything."""


Pattern = PCon | PVar | PWild


@dataclass(frozen=True)
class Arm:
    pattern: Pattern
    body: Expr


@dataclass(frozen=True)
class Match:
    """Case analysis on a constructed value. The first matching arm wins.

    Example:
        case m of
          Nothing -> 0
          Just x  -> x
    """

    scrutinee: Expr
    arms: tuple[Arm, ...]


# Union of all expression forms
Expr = Var | Lit | Lam | App | Construct | Invoke | Let | If | Match
