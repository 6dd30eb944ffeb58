"""Check interface instances against their algebraic laws on sample values.

Functor:  map id x = x
          map (f . g) x = map f (map g x)
Monad:    bind (pure a) k = k a                            (left identity)
          bind m pure = m                                  (right identity)
          bind (bind m k) h = bind m (\\x -> bind (k x) h)  (associativity)
Monoid:   mappend mempty a = a = mappend a mempty
          mappend (mappend a b) c = mappend a (mappend b c)

A law is checked by evaluating both sides on every sample and comparing
the fully forced results. Nothing here proves a law; a failing sample
disproves it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import EvalError
from .evaluator import Evaluator
from .prelude import from_list, just, nothing, writer
from .show import show
from .values import Builtin, values_equal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LawResult:
    type_name: str
    law: str
    holds: bool
    detail: str = ""


def _fn(name: str, f: Callable[[Any], Any]) -> Builtin:
    return Builtin(name, 1, lambda ev, x: f(ev.force(x)))


def _same(ev: Evaluator, lhs: Callable[[], Any], rhs: Callable[[], Any]) -> tuple[bool, str]:
    try:
        left = ev.force_deep(lhs())
        right = ev.force_deep(rhs())
    except EvalError as e:
        return False, f"evaluation failed: {e}"
    if values_equal(left, right):
        return True, ""
    return False, f"{show(left)} != {show(right)}"


def _collect(
    ev: Evaluator,
    type_name: str,
    law: str,
    cases: Sequence[tuple[Callable[[], Any], Callable[[], Any]]],
    samples: Sequence[Any],
) -> LawResult:
    for (lhs, rhs), sample in zip(cases, samples, strict=True):
        holds, detail = _same(ev, lhs, rhs)
        if not holds:
            logger.warning("Law %s fails for %s on %s: %s", law, type_name, show(sample), detail)
            return LawResult(type_name, law, False, f"on {show(sample)}: {detail}")
    return LawResult(type_name, law, True)


def check_functor_laws(
    ev: Evaluator,
    type_name: str,
    samples: Sequence[Any],
    f: Any = None,
    g: Any = None,
) -> list[LawResult]:
    identity = Builtin("id", 1, lambda ev, x: x)
    f = f or _fn("inc", lambda x: x + 1)
    g = g or _fn("double", lambda x: x * 2)
    f_after_g = Builtin("f.g", 1, lambda ev, x: ev.apply(f, (ev.apply(g, (x,)),)))

    return [
        _collect(
            ev, type_name, "functor_identity",
            [(lambda s=s: ev.map(identity, s), lambda s=s: s) for s in samples],
            samples,
        ),
        _collect(
            ev, type_name, "functor_composition",
            [
                (lambda s=s: ev.map(f_after_g, s), lambda s=s: ev.map(f, ev.map(g, s)))
                for s in samples
            ],
            samples,
        ),
    ]


def check_monad_laws(
    ev: Evaluator,
    type_name: str,
    samples: Sequence[Any],
    k: Any,
    h: Any,
    values: Sequence[Any] = (0, 1, 5),
) -> list[LawResult]:
    """``k`` and ``h`` are continuations ``a -> m b`` returning ``type_name`` values."""
    ret = Builtin("pure", 1, lambda ev, x: ev.pure(x, type_name))
    k_then_h = Builtin("k>=>h", 1, lambda ev, x: ev.bind(ev.apply(k, (x,)), h))

    return [
        _collect(
            ev, type_name, "monad_left_identity",
            [
                (lambda a=a: ev.bind(ev.pure(a, type_name), k), lambda a=a: ev.apply(k, (a,)))
                for a in values
            ],
            values,
        ),
        _collect(
            ev, type_name, "monad_right_identity",
            [(lambda m=m: ev.bind(m, ret), lambda m=m: m) for m in samples],
            samples,
        ),
        _collect(
            ev, type_name, "monad_associativity",
            [
                (lambda m=m: ev.bind(ev.bind(m, k), h), lambda m=m: ev.bind(m, k_then_h))
                for m in samples
            ],
            samples,
        ),
    ]


def check_monoid_laws(ev: Evaluator, type_name: str, samples: Sequence[Any]) -> list[LawResult]:
    empty = ev.mempty(type_name)
    triples = [(a, b, c) for a in samples for b in samples for c in samples]
    return [
        _collect(
            ev, type_name, "monoid_left_identity",
            [(lambda a=a: ev.mappend(empty, a), lambda a=a: a) for a in samples],
            samples,
        ),
        _collect(
            ev, type_name, "monoid_right_identity",
            [(lambda a=a: ev.mappend(a, empty), lambda a=a: a) for a in samples],
            samples,
        ),
        _collect(
            ev, type_name, "monoid_associativity",
            [
                (
                    lambda t=t: ev.mappend(ev.mappend(t[0], t[1]), t[2]),
                    lambda t=t: ev.mappend(t[0], ev.mappend(t[1], t[2])),
                )
                for t in triples
            ],
            [from_list(t) for t in triples],
        ),
    ]


# ---------------------------------------------------------------------------
# Prelude instances
# ---------------------------------------------------------------------------


def _prelude_checks(ev: Evaluator) -> dict[str, Callable[[], list[LawResult]]]:
    maybe_samples = [nothing(), just(0), just(7)]
    list_samples = [from_list([]), from_list([1]), from_list([1, 2, 3])]
    writer_samples = [writer(1), writer(2, "start;"), writer(3, "a;b;")]

    half = _fn("half", lambda x: just(x // 2) if x % 2 == 0 else nothing())
    dec = _fn("dec", lambda x: just(x - 1) if x > 0 else nothing())
    around = _fn("around", lambda x: from_list([x - 1, x + 1]))
    twice = _fn("twice", lambda x: from_list([x, x]))
    log_inc = _fn("log_inc", lambda x: writer(x + 1, f"inc {x};"))
    log_sq = _fn("log_sq", lambda x: writer(x * x, f"sq {x};"))

    return {
        "Maybe": lambda: (
            check_functor_laws(ev, "Maybe", maybe_samples)
            + check_monad_laws(ev, "Maybe", maybe_samples, half, dec)
        ),
        "List": lambda: (
            check_functor_laws(ev, "List", list_samples)
            + check_monad_laws(ev, "List", list_samples, around, twice)
            + check_monoid_laws(ev, "List", list_samples)
        ),
        "Writer": lambda: (
            check_functor_laws(ev, "Writer", writer_samples)
            + check_monad_laws(ev, "Writer", writer_samples, log_inc, log_sq)
        ),
        "String": lambda: check_monoid_laws(ev, "String", ["", "ab", "c"]),
    }


def verify_prelude(ev: Evaluator, type_name: str | None = None) -> list[LawResult]:
    """Run the laws for every prelude instance, or only for ``type_name``."""
    checks = _prelude_checks(ev)
    if type_name is not None:
        if type_name not in checks:
            raise KeyError(f"No law samples for type {type_name!r}")
        checks = {type_name: checks[type_name]}
    results: list[LawResult] = []
    for name, run in checks.items():
        logger.debug("Checking laws for %s", name)
        results.extend(run())
    return results
