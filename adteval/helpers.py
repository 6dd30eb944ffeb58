"""Builder helpers for constructing expressions.

These are the primary public API for writing programs. Prefer them over
constructing AST nodes directly.
"""

from typing import Any

from adteval.expr import (
    App,
    Arm,
    Construct,
    Expr,
    If,
    Invoke,
    Lam,
    Let,
    Lit,
    Match,
    Pattern,
    PCon,
    PVar,
    PWild,
    Var,
)


def var(name: str) -> Var:
    return Var(name=name)


def lit(value: Any) -> Lit:
    return Lit(value=value)


def lam(params: list[str] | str, body: Expr) -> Lam:
    if isinstance(params, str):
        params = params.split()
    return Lam(params=tuple(params), body=body)


def app(fn: Expr | str, *args: Expr) -> App:
    """Apply a function; a string names a variable (``app("add", x, y)``)."""
    return App(fn=var(fn) if isinstance(fn, str) else fn, args=tuple(args))


def con(tag: str, *args: Expr) -> Construct:
    return Construct(tag=tag, args=tuple(args))


def invoke(method: str, *args: Expr, type_hint: str | None = None) -> Invoke:
    return Invoke(method=method, args=tuple(args), type_hint=type_hint)


def let(name: str, value: Expr, body: Expr) -> Let:
    return Let(name=name, value=value, body=body)


def letrec(name: str, value: Expr, body: Expr) -> Let:
    return Let(name=name, value=value, body=body, recursive=True)


def if_(cond: Expr, then: Expr, orelse: Expr) -> If:
    return If(cond=cond, then=then, orelse=orelse)


def pcon(tag: str, *binders: str) -> PCon:
    return PCon(tag=tag, binders=tuple(binders))


def pvar(name: str) -> PVar:
    return PVar(name=name)


def wild() -> PWild:
    return PWild()


def arm(pattern: Pattern, body: Expr) -> Arm:
    return Arm(pattern=pattern, body=body)


def match(scrutinee: Expr, *arms: Arm) -> Match:
    return Match(scrutinee=scrutinee, arms=tuple(arms))


# Interface methods


def fmap(f: Expr, fa: Expr) -> Invoke:
    return invoke("map", f, fa)


def bind(ma: Expr, f: Expr) -> Invoke:
    return invoke("bind", ma, f)


def pure(x: Expr, type_name: str) -> Invoke:
    return invoke("pure", x, type_hint=type_name)


def foldr(f: Expr, z: Expr, t: Expr) -> Invoke:
    return invoke("foldr", f, z, t)


def foldl(f: Expr, z: Expr, t: Expr) -> Invoke:
    return invoke("foldl", f, z, t)


def list_of(*items: Expr) -> Expr:
    """``[a, b, c]`` as nested Cons/Nil constructors."""
    result: Expr = con("Nil")
    for item in reversed(items):
        result = con("Cons", item, result)
    return result
