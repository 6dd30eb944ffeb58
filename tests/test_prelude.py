"""Tests for the prelude: instances, monoids, builtins, host helpers."""

from __future__ import annotations

import pytest

from adteval.errors import EvalError, TypeMismatchError
from adteval.evaluator import Evaluator
from adteval.helpers import app, lit, list_of
from adteval.prelude import (
    BUILTINS,
    default_evaluator,
    default_types,
    from_list,
    just,
    nothing,
    to_list,
    writer,
)
from adteval.result import Err, Ok
from adteval.show import show
from adteval.values import MEMPTY, Builtin, Closure, Data, Partial, Thunk


@pytest.fixture
def ev() -> Evaluator:
    return default_evaluator()


def test_prelude_types() -> None:
    types = default_types()
    assert set(types.type_names) == {"Maybe", "List", "Writer", "Mempty"}
    dt, ctor = types.get_constructor("Cons")
    assert dt.name == "List"
    assert ctor.field_names == ("head", "tail")


def test_list_helpers() -> None:
    xs = from_list([1, 2, 3])
    assert xs == Data("List", "Cons", (1, Data("List", "Cons", (2, Data("List", "Cons", (3, Data("List", "Nil")))))))
    assert to_list(xs) == [1, 2, 3]
    assert to_list(from_list([])) == []
    with pytest.raises(TypeMismatchError):
        to_list(just(1))


class TestMonoids:
    def test_string_monoid(self, ev: Evaluator) -> None:
        assert ev.mappend("ab", "cd") == "abcd"
        assert ev.mempty("String") == ""

    def test_list_monoid(self, ev: Evaluator) -> None:
        assert ev.mappend(from_list([1]), from_list([2, 3])) == from_list([1, 2, 3])
        assert ev.mempty("List") == from_list([])

    def test_mempty_is_two_sided_identity(self, ev: Evaluator) -> None:
        assert ev.mappend(MEMPTY, "x") == "x"
        assert ev.mappend("x", MEMPTY) == "x"
        assert ev.mappend(MEMPTY, from_list([1])) == from_list([1])
        assert ev.mappend(from_list([1]), MEMPTY) == from_list([1])
        assert ev.mappend(MEMPTY, MEMPTY) == MEMPTY

    def test_mixed_monoids_rejected(self, ev: Evaluator) -> None:
        with pytest.raises(TypeMismatchError):
            ev.mappend("x", from_list([1]))

    def test_writer_pure_then_tell(self, ev: Evaluator) -> None:
        start = ev.pure(1, "Writer")
        assert start == writer(1, MEMPTY)
        tell = ev.globals["tell"]
        result = ev.then(start, ev.apply(tell, ("logged",)))
        assert result == writer(None, "logged")


class TestBuiltins:
    @pytest.mark.parametrize(
        ("name", "args", "expected"),
        [
            ("add", (2, 3), 5),
            ("sub", (2, 3), -1),
            ("mul", (2, 3), 6),
            ("div", (7, 2), 3),
            ("div", (7.0, 2), 3.5),
            ("mod", (7, 3), 1),
            ("neg", (4,), -4),
            ("lt", (1, 2), True),
            ("ge", ("b", "a"), True),
            ("not", (True,), False),
            ("and", (True, False), False),
            ("or", (True, False), True),
            ("concat", ("ab", "c"), "abc"),
            ("eq", (just(1), just(1)), True),
            ("ne", (just(1), nothing()), True),
            ("show", (from_list([1, 2]),), "[1, 2]"),
            ("length", (from_list(["a", "b", "c"]),), 3),
            ("length", (nothing(),), 0),
        ],
    )
    def test_builtin(self, ev: Evaluator, name: str, args: tuple, expected: object) -> None:
        assert ev.apply(BUILTINS[name], args) == expected

    def test_type_errors(self, ev: Evaluator) -> None:
        with pytest.raises(TypeMismatchError):
            ev.apply(BUILTINS["add"], (1, "two"))
        with pytest.raises(TypeMismatchError):
            ev.apply(BUILTINS["add"], (True, 1))
        with pytest.raises(TypeMismatchError):
            ev.apply(BUILTINS["lt"], (1, "a"))
        with pytest.raises(TypeMismatchError):
            ev.apply(BUILTINS["not"], (0,))

    def test_equality_keeps_bool_apart_from_int(self, ev: Evaluator) -> None:
        assert ev.run(app("eq", lit(1), lit(True))) == Ok(False)
        assert ev.run(app("ne", lit(0), lit(False))) == Ok(True)
        assert ev.apply(BUILTINS["eq"], (just(1), just(True))) is False
        assert ev.apply(BUILTINS["eq"], (from_list([1, 0]), from_list([True, False]))) is False
        assert ev.apply(BUILTINS["eq"], (1, 1.0)) is True
        assert ev.apply(BUILTINS["eq"], (nothing(), 0)) is False

    def test_equality_on_long_lists(self, ev: Evaluator) -> None:
        xs = from_list(range(3000))
        assert ev.apply(BUILTINS["eq"], (xs, from_list(range(3000)))) is True
        assert ev.apply(BUILTINS["ne"], (xs, from_list(range(2999)))) is True

    def test_division_by_zero(self, ev: Evaluator) -> None:
        with pytest.raises(EvalError):
            ev.apply(BUILTINS["div"], (1, 0))
        with pytest.raises(EvalError):
            ev.apply(BUILTINS["mod"], (1, 0))

    def test_const_does_not_force(self, ev: Evaluator) -> None:
        def boom() -> object:
            raise AssertionError("forced")

        assert ev.apply(BUILTINS["const"], (1, Thunk(boom))) == 1

    def test_flip_and_compose(self, ev: Evaluator) -> None:
        assert ev.apply(BUILTINS["flip"], (BUILTINS["sub"], 1, 10)) == 9
        inc = ev.apply(BUILTINS["add"], (1,))
        dbl = ev.apply(BUILTINS["mul"], (2,))
        assert ev.apply(BUILTINS["compose"], (inc, dbl, 5)) == 11

    def test_tell(self, ev: Evaluator) -> None:
        assert ev.run(app("tell", lit("hi"))) == Ok(writer(None, "hi"))

    def test_length_of_int_fails(self, ev: Evaluator) -> None:
        assert isinstance(ev.run(app("length", lit(3))), Err)


class TestShow:
    def test_values(self) -> None:
        assert show(just(3)) == "Just 3"
        assert show(nothing()) == "Nothing"
        assert show(from_list([1, 2, 3])) == "[1, 2, 3]"
        assert show(from_list([])) == "[]"
        assert show(writer(3, "log")) == 'Writer (3, "log")'
        assert show(writer(3)) == "Writer (3, mempty)"
        assert show(True) == "True"
        assert show(None) == "()"
        assert show("a\"b") == '"a\\"b"'
        assert show(just(from_list([1]))) == "Just [1]"

    def test_improper_list_uses_constructor_form(self) -> None:
        bad = Data("List", "Cons", (1, 5))
        assert show(bad) == "Cons 1 5"
        assert show(just(bad)) == "Just (Cons 1 5)"
        assert show(from_list([1], tail=bad)) == "Cons 1 (Cons 1 5)"

    def test_functions(self) -> None:
        add = BUILTINS["add"]
        assert show(add) == "<builtin add>"
        assert show(Partial(add, (1,))) == "<partial add/1>"
        assert show(Closure(("x", "y"), lit(1), {})) == "<lambda/2>"
        assert show(Closure(("x",), lit(1), {}, name="len")) == "<lambda len/1>"
        assert show(Thunk(lambda: 1)) == "<thunk>"
        assert show(Builtin("f", 1, lambda ev, x: x)) == "<builtin f>"

    def test_evaluated_list(self, ev: Evaluator) -> None:
        assert show(ev.evaluate(list_of(lit("a"), lit("b")))) == '["a", "b"]'
