"""Worked example programs: folds, functors and monads over the prelude types.

Each example is a function returning an expression. ``ALL_EXAMPLES`` pairs
them with the rendering of their value, which the CLI ``demo`` command and
the tests compare against.
"""

from __future__ import annotations

from collections.abc import Callable

from adteval.expr import Expr
from adteval.helpers import (
    app,
    arm,
    bind,
    con,
    fmap,
    foldl,
    foldr,
    if_,
    invoke,
    lam,
    let,
    letrec,
    list_of,
    lit,
    match,
    pcon,
    pure,
    var,
)

# =====================================================================
# Folds
# =====================================================================


def sum_with_foldl() -> Expr:
    """foldl add 0 [1, 2, 3, 4, 5]"""
    return foldl(var("add"), lit(0), list_of(*(lit(i) for i in range(1, 6))))


def product_with_foldr() -> Expr:
    """foldr mul 1 [1, 2, 3, 4]"""
    return foldr(var("mul"), lit(1), list_of(*(lit(i) for i in range(1, 5))))


def first_above_two() -> Expr:
    """foldr (\\x acc -> if x > 2 then x else acc) 0 [1, 2, 3, 4, 5]

    The accumulator is never demanded once an element above two is found,
    so the fold stops at 3.
    """
    step = lam("x acc", if_(app("gt", var("x"), lit(2)), var("x"), var("acc")))
    return foldr(step, lit(0), list_of(*(lit(i) for i in range(1, 6))))


def squares_via_foldr() -> Expr:
    """foldr (\\x acc -> Cons (x * x) acc) Nil [1, 2, 3]"""
    step = lam("x acc", con("Cons", app("mul", var("x"), var("x")), var("acc")))
    return foldr(step, con("Nil"), list_of(lit(1), lit(2), lit(3)))


def recursive_length() -> Expr:
    """let rec len xs = case xs of Nil -> 0; Cons _ t -> 1 + len t"""
    body = match(
        var("xs"),
        arm(pcon("Nil"), lit(0)),
        arm(pcon("Cons", "_", "t"), app("add", lit(1), app("len", var("t")))),
    )
    return letrec(
        "len",
        lam("xs", body),
        app("len", list_of(lit("a"), lit("b"), lit("c"))),
    )


# =====================================================================
# Functor
# =====================================================================


def increment_maybe() -> Expr:
    """map (add 1) (Just 41)"""
    return fmap(app("add", lit(1)), con("Just", lit(41)))


def map_over_nothing() -> Expr:
    """map (add 1) Nothing"""
    return fmap(app("add", lit(1)), con("Nothing"))


def double_list() -> Expr:
    """map (mul 2) [1, 2, 3]"""
    return fmap(app("mul", lit(2)), list_of(lit(1), lit(2), lit(3)))


# =====================================================================
# Monad
# =====================================================================


def _safe_div(body: Expr) -> Expr:
    return let(
        "safeDiv",
        lam(
            "a b",
            if_(
                app("eq", var("b"), lit(0)),
                con("Nothing"),
                con("Just", app("div", var("a"), var("b"))),
            ),
        ),
        body,
    )


def safe_division_chain() -> Expr:
    """Just 100 >>= \\x -> safeDiv x 5 >>= \\y -> safeDiv y 2"""
    return _safe_div(
        bind(
            con("Just", lit(100)),
            lam("x", bind(app("safeDiv", var("x"), lit(5)), lam("y", app("safeDiv", var("y"), lit(2))))),
        )
    )


def division_by_zero_short_circuits() -> Expr:
    """Just 100 >>= \\x -> safeDiv x 0 >>= \\y -> safeDiv y 2"""
    return _safe_div(
        bind(
            con("Just", lit(100)),
            lam("x", bind(app("safeDiv", var("x"), lit(0)), lam("y", app("safeDiv", var("y"), lit(2))))),
        )
    )


def list_pairs() -> Expr:
    """[1, 2] >>= \\x -> ["a", "b"] >>= \\y -> pure (show x ++ y)"""
    return bind(
        list_of(lit(1), lit(2)),
        lam(
            "x",
            bind(
                list_of(lit("a"), lit("b")),
                lam("y", pure(app("concat", app("show", var("x")), var("y")), "List")),
            ),
        ),
    )


def monad_map_alias() -> Expr:
    """monadMap [1, 2, 3] (\\x -> [x, x * 10])"""
    return invoke(
        "monadMap",
        list_of(lit(1), lit(2), lit(3)),
        lam("x", list_of(var("x"), app("mul", var("x"), lit(10)))),
    )


def writer_logging() -> Expr:
    """tell "start;" >>= \\_ -> Writer 3 "got 3;" >>= \\x -> pure (x * 2)"""
    return bind(
        app("tell", lit("start;")),
        lam(
            "_",
            bind(
                con("Writer", lit(3), lit("got 3;")),
                lam("x", pure(app("mul", var("x"), lit(2)), "Writer")),
            ),
        ),
    )


ALL_EXAMPLES: tuple[tuple[str, Callable[[], Expr], str], ...] = (
    ("sum_with_foldl", sum_with_foldl, "15"),
    ("product_with_foldr", product_with_foldr, "24"),
    ("first_above_two", first_above_two, "3"),
    ("squares_via_foldr", squares_via_foldr, "[1, 4, 9]"),
    ("recursive_length", recursive_length, "3"),
    ("increment_maybe", increment_maybe, "Just 42"),
    ("map_over_nothing", map_over_nothing, "Nothing"),
    ("double_list", double_list, "[2, 4, 6]"),
    ("safe_division_chain", safe_division_chain, "Just 10"),
    ("division_by_zero_short_circuits", division_by_zero_short_circuits, "Nothing"),
    ("list_pairs", list_pairs, '["1a", "1b", "2a", "2b"]'),
    ("monad_map_alias", monad_map_alias, "[1, 10, 2, 20, 3, 30]"),
    ("writer_logging", writer_logging, 'Writer (6, "start;got 3;")'),
)
