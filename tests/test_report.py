import jinja2
import pytest

from adteval.check import check_program
from adteval.helpers import app, arm, con, lit, match, pcon, var
from adteval.interfaces import MONAD, MONOID
from adteval.prelude import BUILTINS, WRITER, default_registry, default_types
from adteval.reference import format_data_type, format_method, generate_reference
from adteval.render import render
from adteval.report import check_json, format_check


def _check(expr):  # type: ignore[no-untyped-def]
    return check_program(expr, default_types(), default_registry(), BUILTINS, name="prog")


def test_format_check_lists_diagnostics() -> None:
    expr = match(app("add", var("y"), lit(1)), arm(pcon("Just", "x"), var("x")))
    text = format_check(_check(expr))
    lines = text.splitlines()
    assert lines[0] == "prog: × ill-formed (1 errors)"
    assert any("[var_bound] at expr.scrutinee.args[0]" in line for line in lines)
    assert any("[match_exhaustive]" in line and "(WARNING)" in line for line in lines)
    assert lines[-1] == "  ⚠ 1 warning"


def test_check_json() -> None:
    data = check_json(_check(con("Just", lit(1), lit(2))))
    assert data["subject"] == "prog"
    assert data["well_formed"] is False
    assert data["error_count"] == 1
    assert data["diagnostics"][0]["check"] == "constructor_arity"
    assert data["diagnostics"][0]["severity"] == "error"


def test_reference_formatting() -> None:
    assert format_data_type(WRITER) == "Writer w a = Writer a w"
    assert format_method(MONAD, "pure") == "pure(x): needs a type annotation"
    assert format_method(MONOID, "mempty") == (
        "mempty(): needs a type annotation (default `Mempty`)"
    )
    assert format_method(MONAD, "monadMap").startswith("bind(ma, f)")


def test_generate_reference_builtins() -> None:
    text = generate_reference(builtins=["add", "tell"])
    assert text.rstrip().endswith("add, tell")
    assert "Requires: Functor" in text


def test_render_rejects_missing_context() -> None:
    with pytest.raises(jinja2.UndefinedError):
        render("reference.md.j2", types=[], interfaces=[])
