"""Tests for adteval.evaluator: expressions, application, dispatch, laziness."""

from __future__ import annotations

import logging

import pytest

from adteval.config import Settings
from adteval.errors import (
    AmbiguousDispatchError,
    ConstructorArityError,
    DispatchError,
    EvalDepthError,
    MatchError,
    MethodArityError,
    NotCallableError,
    TypeMismatchError,
    UnboundVariableError,
    UnknownConstructorError,
)
from adteval.evaluator import Evaluator
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
    pvar,
    var,
    wild,
)
from adteval.prelude import default_evaluator, from_list, just, nothing, to_list, writer
from adteval.registry import Instance
from adteval.result import Err, Ok
from adteval.values import MEMPTY, Builtin, Data, Partial, Thunk


@pytest.fixture
def ev() -> Evaluator:
    return default_evaluator()


def _value(ev: Evaluator, expr) -> object:
    match ev.run(expr):
        case Ok(value):
            return value
        case Err(e):
            raise AssertionError(f"evaluation failed: {e!r}")


# ─────────────────────────────────────────────────────────────────────────────
# Core expressions
# ─────────────────────────────────────────────────────────────────────────────


class TestExpressions:
    def test_literal(self, ev: Evaluator) -> None:
        assert ev.evaluate(lit(7)) == 7

    def test_unbound_variable(self, ev: Evaluator) -> None:
        with pytest.raises(UnboundVariableError) as exc:
            ev.evaluate(var("nope"))
        assert exc.value.name == "nope"

    def test_local_binding_shadows_global(self, ev: Evaluator) -> None:
        assert ev.evaluate(let("add", lit(5), var("add"))) == 5

    def test_let_is_not_recursive(self, ev: Evaluator) -> None:
        with pytest.raises(UnboundVariableError):
            ev.evaluate(let("x", var("x"), var("x")))

    def test_if_requires_bool(self, ev: Evaluator) -> None:
        with pytest.raises(TypeMismatchError):
            ev.evaluate(if_(lit(1), lit(2), lit(3)))

    def test_if_evaluates_one_branch(self, ev: Evaluator) -> None:
        # the else branch would fail if evaluated
        assert ev.evaluate(if_(lit(True), lit("yes"), var("unbound"))) == "yes"

    def test_construct(self, ev: Evaluator) -> None:
        assert ev.evaluate(con("Just", lit(1))) == just(1)
        assert ev.evaluate(list_of(lit(1), lit(2))) == from_list([1, 2])

    def test_unknown_constructor(self, ev: Evaluator) -> None:
        with pytest.raises(UnknownConstructorError):
            ev.evaluate(con("Some", lit(1)))

    def test_constructor_arity(self, ev: Evaluator) -> None:
        with pytest.raises(ConstructorArityError) as exc:
            ev.evaluate(con("Just"))
        assert (exc.value.expected, exc.value.got) == (1, 0)

    def test_match_first_arm_wins(self, ev: Evaluator) -> None:
        expr = match(
            con("Just", lit(4)),
            arm(pcon("Just", "x"), app("mul", var("x"), lit(10))),
            arm(wild(), lit(0)),
        )
        assert ev.evaluate(expr) == 40

    def test_match_variable_pattern(self, ev: Evaluator) -> None:
        expr = match(con("Nothing"), arm(pcon("Just", "x"), var("x")), arm(pvar("m"), var("m")))
        assert ev.evaluate(expr) == nothing()

    def test_match_failure(self, ev: Evaluator) -> None:
        with pytest.raises(MatchError):
            ev.evaluate(match(con("Nothing"), arm(pcon("Just", "x"), var("x"))))

    def test_match_pattern_arity(self, ev: Evaluator) -> None:
        with pytest.raises(MatchError):
            ev.evaluate(match(con("Just", lit(1)), arm(pcon("Just"), lit(0))))

    def test_recursive_let(self, ev: Evaluator) -> None:
        fact = lam(
            "n",
            if_(
                app("le", var("n"), lit(1)),
                lit(1),
                app("mul", var("n"), app("fact", app("sub", var("n"), lit(1)))),
            ),
        )
        assert ev.evaluate(letrec("fact", fact, app("fact", lit(5)))) == 120


# ─────────────────────────────────────────────────────────────────────────────
# Application
# ─────────────────────────────────────────────────────────────────────────────


class TestApplication:
    def test_partial_application(self, ev: Evaluator) -> None:
        inc = ev.evaluate(app("add", lit(1)))
        assert isinstance(inc, Partial)
        assert inc.remaining == 1
        assert ev.apply(inc, (41,)) == 42

    def test_closure_currying(self, ev: Evaluator) -> None:
        add3 = lam("a b c", app("add", var("a"), app("add", var("b"), var("c"))))
        assert ev.evaluate(app(app(add3, lit(1)), lit(2), lit(3))) == 6

    def test_over_application(self, ev: Evaluator) -> None:
        # const returns a function, which takes the extra argument
        expr = app("const", app("add", lit(10)), lit("ignored"), lit(5))
        assert ev.evaluate(expr) == 15

    def test_closure_captures_environment(self, ev: Evaluator) -> None:
        expr = let("k", lit(3), let("f", lam("x", app("mul", var("x"), var("k"))), app("f", lit(4))))
        assert ev.evaluate(expr) == 12

    def test_python_callable(self, ev: Evaluator) -> None:
        assert ev.apply(lambda a, b: a - b, (10, 4)) == 6

    def test_not_callable(self, ev: Evaluator) -> None:
        with pytest.raises(NotCallableError):
            ev.evaluate(app(lit(3), lit(4)))

    def test_builtin_division_by_zero(self, ev: Evaluator) -> None:
        match ev.run(app("div", lit(1), lit(0))):
            case Err(e):
                assert "division by zero" in str(e)
            case Ok(v):
                pytest.fail(f"expected an error, got {v!r}")


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────


class TestDispatch:
    def test_map_dispatches_on_container(self, ev: Evaluator) -> None:
        inc = app("add", lit(1))
        assert _value(ev, fmap(inc, con("Just", lit(1)))) == just(2)
        assert _value(ev, fmap(inc, list_of(lit(1), lit(2)))) == from_list([2, 3])
        assert _value(ev, fmap(inc, con("Writer", lit(1), lit("w")))) == writer(2, "w")

    def test_pure_needs_annotation(self, ev: Evaluator) -> None:
        with pytest.raises(AmbiguousDispatchError):
            ev.evaluate(invoke("pure", lit(1)))
        assert ev.evaluate(pure(lit(1), "Maybe")) == just(1)
        assert ev.evaluate(pure(lit(1), "List")) == from_list([1])
        assert ev.evaluate(pure(lit(1), "Writer")) == writer(1, MEMPTY)

    def test_mempty_defaults_to_polymorphic_identity(self, ev: Evaluator) -> None:
        assert ev.evaluate(invoke("mempty")) == MEMPTY
        assert ev.evaluate(invoke("mempty", type_hint="String")) == ""

    def test_missing_instance(self, ev: Evaluator) -> None:
        with pytest.raises(DispatchError) as exc:
            ev.evaluate(fmap(var("id"), lit(3)))
        assert "No instance Functor Int" in str(exc.value)

    def test_unknown_method(self, ev: Evaluator) -> None:
        with pytest.raises(DispatchError):
            ev.evaluate(invoke("traverse", lit(1)))

    def test_method_arity(self, ev: Evaluator) -> None:
        with pytest.raises(MethodArityError):
            ev.evaluate(invoke("map", var("id")))

    def test_monad_map_alias(self, ev: Evaluator) -> None:
        k = Builtin("k", 1, lambda ev, x: just(ev.force(x) * 2))
        assert ev.monad_map(just(4), k) == ev.bind(just(4), k) == just(8)

    def test_run_wraps_dispatch_errors(self, ev: Evaluator) -> None:
        match ev.run(fmap(var("id"), lit(3))):
            case Err(e):
                assert isinstance(e, DispatchError)
            case Ok(v):
                pytest.fail(f"expected an error, got {v!r}")

    def test_trace_dispatch_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        ev = default_evaluator(Settings(trace_dispatch=True))
        with caplog.at_level(logging.DEBUG, logger="adteval.evaluator"):
            ev.map(Builtin("id", 1, lambda ev, x: x), just(1))
        assert any("Functor.map @ Maybe" in r.getMessage() for r in caplog.records)

    def test_user_defined_instance(self, ev: Evaluator) -> None:
        from adteval.registry import Instance
        from adteval.types import ConstructorDecl, DataType, FieldDecl, TypeRef

        ev.types = ev.types.extend(
            DataType(TypeRef("Box"), ("a",), (ConstructorDecl("Box", (FieldDecl("item", "a"),)),))
        )
        box_map = ev.evaluate(
            lam("f b", match(var("b"), arm(pcon("Box", "x"), con("Box", app(var("f"), var("x"))))))
        )
        ev.registry.register(Instance("Box", "Functor", {"map": box_map}))
        assert _value(ev, fmap(app("mul", lit(3)), con("Box", lit(5)))) == Data("Box", "Box", (15,))


# ─────────────────────────────────────────────────────────────────────────────
# Folds and laziness
# ─────────────────────────────────────────────────────────────────────────────


def _counting(ev_calls: list[object], lazy: bool) -> Builtin:
    """A combining function that records its element and, if lazy, ignores the accumulator."""

    def impl(ev: Evaluator, x: object, acc: object) -> object:
        ev_calls.append(x)
        return x if lazy else ev.force(x) + ev.force(acc)

    return Builtin("step", 2, impl)


class TestFolds:
    def test_foldr_and_foldl(self, ev: Evaluator) -> None:
        xs = list_of(lit(1), lit(2), lit(3))
        assert _value(ev, foldr(var("sub"), lit(0), xs)) == 1 - (2 - (3 - 0))
        assert _value(ev, foldl(var("sub"), lit(0), xs)) == ((0 - 1) - 2) - 3

    def test_foldr_receives_thunk(self, ev: Evaluator) -> None:
        seen: list[object] = []

        def impl(ev: Evaluator, x: object, acc: object) -> object:
            seen.append(acc)
            return x

        ev.foldr(Builtin("first", 2, impl), 0, from_list([1, 2, 3]))
        assert len(seen) == 1
        assert isinstance(seen[0], Thunk)
        assert not seen[0].is_forced

    def test_foldr_short_circuits(self, ev: Evaluator) -> None:
        calls: list[object] = []
        assert ev.foldr(_counting(calls, lazy=True), 0, from_list([1, 2, 3])) == 1
        assert calls == [1]

    def test_foldr_forces_on_demand(self, ev: Evaluator) -> None:
        calls: list[object] = []
        assert ev.foldr(_counting(calls, lazy=False), 0, from_list([1, 2, 3])) == 6
        assert calls == [1, 2, 3]

    def test_foldl_is_strict(self, ev: Evaluator) -> None:
        calls: list[object] = []

        def impl(ev: Evaluator, acc: object, x: object) -> object:
            calls.append(x)
            return acc

        assert ev.foldl(Builtin("keep", 2, impl), "seed", from_list([1, 2, 3])) == "seed"
        assert calls == [1, 2, 3]

    def test_foldr_closure_short_circuit(self, ev: Evaluator) -> None:
        step = lam("x acc", if_(app("gt", var("x"), lit(2)), var("x"), var("acc")))
        # the tail after 3 is not a valid number list; it is never reached
        xs = list_of(lit(1), lit(3), lit("not a number"))
        assert _value(ev, foldr(step, lit(0), xs)) == 3

    def test_annotated_method_on_lazy_accumulator(self, ev: Evaluator) -> None:
        xs = list_of(lit(1))
        plain = lam("x acc", invoke("map", var("id"), var("acc")))
        hinted = lam("x acc", invoke("map", var("id"), var("acc"), type_hint="Maybe"))
        assert _value(ev, foldr(plain, con("Just", lit(0)), xs)) == just(0)
        assert _value(ev, foldr(hinted, con("Just", lit(0)), xs)) == just(0)

    def test_annotated_invoke_forces_dispatch_argument(self, ev: Evaluator) -> None:
        seen: list[object] = []

        def record(ev: Evaluator, f: object, fa: object) -> object:
            seen.append(fa)
            return fa

        ev.registry.register(
            Instance("Maybe", "Functor", {"map": Builtin("map@record", 2, record)}),
            replace=True,
        )
        assert ev.invoke("map", (ev.globals["id"], Thunk(lambda: just(1))), "Maybe") == just(1)
        assert seen == [just(1)]

    def test_fold_over_maybe_and_writer(self, ev: Evaluator) -> None:
        add = ev.globals["add"]
        assert ev.fold(add, 10, nothing()) == 10
        assert ev.fold(add, 10, just(5)) == 15
        assert ev.fold(add, 10, writer(5, "log")) == 15
        assert ev.foldr(add, 10, just(5)) == 15

    def test_fold_is_strict_left(self, ev: Evaluator) -> None:
        concat = ev.globals["concat"]
        assert ev.fold(concat, "", from_list(["a", "b", "c"])) == "abc"

    def test_long_list_foldl(self, ev: Evaluator) -> None:
        xs = from_list(range(5000))
        assert ev.foldl(ev.globals["add"], 0, xs) == sum(range(5000))
        assert len(to_list(ev.map(ev.globals["neg"], xs))) == 5000


# ─────────────────────────────────────────────────────────────────────────────
# Monad operations
# ─────────────────────────────────────────────────────────────────────────────


class TestMonads:
    def test_maybe_bind_short_circuits(self, ev: Evaluator) -> None:
        calls: list[object] = []

        def k(ev: Evaluator, x: object) -> object:
            calls.append(x)
            return just(x)

        assert ev.bind(nothing(), Builtin("k", 1, k)) == nothing()
        assert calls == []

    def test_bind_result_type_checked(self, ev: Evaluator) -> None:
        with pytest.raises(TypeMismatchError):
            ev.bind(just(1), Builtin("bad", 1, lambda ev, x: from_list([x])))

    def test_list_bind_concatenates(self, ev: Evaluator) -> None:
        k = Builtin("dup", 1, lambda ev, x: from_list([x, x]))
        assert ev.bind(from_list([1, 2]), k) == from_list([1, 1, 2, 2])

    def test_writer_bind_accumulates_log(self, ev: Evaluator) -> None:
        k = Builtin("k", 1, lambda ev, x: writer(x + 1, "inc;"))
        assert ev.bind(writer(1, "start;"), k) == writer(2, "start;inc;")

    def test_writer_with_list_log(self, ev: Evaluator) -> None:
        k = Builtin("k", 1, lambda ev, x: writer(x * 2, from_list(["doubled"])))
        result = ev.bind(writer(3, from_list(["start"])), k)
        assert result == writer(6, from_list(["start", "doubled"]))

    def test_then_and_join(self, ev: Evaluator) -> None:
        assert ev.then(writer(None, "a;"), writer(5, "b;")) == writer(5, "a;b;")
        assert ev.then(nothing(), just(1)) == nothing()
        assert ev.join(just(just(3))) == just(3)
        assert ev.join(from_list([from_list([1]), from_list([2, 3])])) == from_list([1, 2, 3])

    def test_bind_expression(self, ev: Evaluator) -> None:
        expr = bind(con("Just", lit(2)), lam("x", con("Just", app("mul", var("x"), var("x")))))
        assert _value(ev, expr) == just(4)


# ─────────────────────────────────────────────────────────────────────────────
# Limits
# ─────────────────────────────────────────────────────────────────────────────


class TestDepth:
    def test_max_depth(self) -> None:
        ev = default_evaluator(Settings(max_depth=50))
        loop = letrec("loop", lam("n", app("loop", app("add", var("n"), lit(1)))), app("loop", lit(0)))
        match ev.run(loop):
            case Err(e):
                assert isinstance(e, EvalDepthError)
            case Ok(v):
                pytest.fail(f"expected an error, got {v!r}")

    def test_depth_resets_after_error(self) -> None:
        ev = default_evaluator(Settings(max_depth=50))
        loop = letrec("loop", lam("n", app("loop", var("n"))), app("loop", lit(0)))
        assert isinstance(ev.run(loop), Err)
        assert ev.run(app("add", lit(1), lit(2))) == Ok(3)

    def test_force_deep_long_list(self, ev: Evaluator) -> None:
        xs = from_list(range(3000))
        assert to_list(ev.force_deep(xs)) == list(range(3000))
