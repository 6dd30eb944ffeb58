"""JSON serialization for expressions and first-order values.

Every node serializes to a dict with a "type" discriminator field.
Round-trip: from_json(to_json(x)) == x for all expressions and for every
value built from primitives and constructors. Functions and thunks have no
JSON form.
"""

from __future__ import annotations

import json
from typing import Any

from .expr import (
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
from .values import Builtin, Closure, Data, Partial, Thunk

# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def value_to_json(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, Data):
        # iterative along the last field so long lists do not recurse per element
        spine: list[Data] = []
        node: Any = v
        while isinstance(node, Data) and node.args:
            spine.append(node)
            node = node.args[-1]
        result = value_to_json(node) if not isinstance(node, Data) else _data_leaf(node)
        for d in reversed(spine):
            result = {
                "type": "data",
                "type_name": d.type_name,
                "tag": d.tag,
                "args": [value_to_json(a) for a in d.args[:-1]] + [result],
            }
        return result
    if isinstance(v, (Closure, Builtin, Partial, Thunk)):
        raise TypeError(f"Cannot serialize {type(v).__name__} values")
    raise TypeError(f"Unknown value type: {type(v)}")


def _data_leaf(d: Data) -> dict[str, Any]:
    return {"type": "data", "type_name": d.type_name, "tag": d.tag, "args": []}


def value_from_json(d: Any) -> Any:
    if d is None or isinstance(d, (bool, int, float, str)):
        return d
    if not isinstance(d, dict):
        raise ValueError(f"Unknown value encoding: {d!r}")
    if d.get("type") != "data":
        raise ValueError(f"Unknown value type: {d.get('type')}")
    spine: list[dict[str, Any]] = []
    node: Any = d
    while isinstance(node, dict) and node.get("type") == "data" and node["args"]:
        spine.append(node)
        node = node["args"][-1]
    if isinstance(node, dict) and node.get("type") == "data":
        result: Any = Data(node["type_name"], node["tag"], ())
    else:
        result = value_from_json(node)
    for n in reversed(spine):
        init = tuple(value_from_json(a) for a in n["args"][:-1])
        result = Data(n["type_name"], n["tag"], init + (result,))
    return result


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


def pattern_to_json(p: Pattern) -> dict[str, Any]:
    if isinstance(p, PCon):
        return {"type": "pcon", "tag": p.tag, "binders": list(p.binders)}
    elif isinstance(p, PVar):
        return {"type": "pvar", "name": p.name}
    elif isinstance(p, PWild):
        return {"type": "pwild"}
    raise TypeError(f"Unknown pattern type: {type(p)}")


def pattern_from_json(d: dict[str, Any]) -> Pattern:
    t = d["type"]
    if t == "pcon":
        return PCon(tag=d["tag"], binders=tuple(d["binders"]))
    elif t == "pvar":
        return PVar(name=d["name"])
    elif t == "pwild":
        return PWild()
    raise ValueError(f"Unknown pattern type: {t}")


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def expr_to_json(e: Expr) -> dict[str, Any]:
    if isinstance(e, Var):
        return {"type": "var", "name": e.name}
    elif isinstance(e, Lit):
        return {"type": "lit", "value": e.value}
    elif isinstance(e, Lam):
        return {"type": "lam", "params": list(e.params), "body": expr_to_json(e.body)}
    elif isinstance(e, App):
        return {
            "type": "app",
            "fn": expr_to_json(e.fn),
            "args": [expr_to_json(a) for a in e.args],
        }
    elif isinstance(e, Construct):
        return {
            "type": "construct",
            "tag": e.tag,
            "args": [expr_to_json(a) for a in e.args],
        }
    elif isinstance(e, Invoke):
        out: dict[str, Any] = {
            "type": "invoke",
            "method": e.method,
            "args": [expr_to_json(a) for a in e.args],
        }
        if e.type_hint is not None:
            out["type_hint"] = e.type_hint
        return out
    elif isinstance(e, Let):
        return {
            "type": "let",
            "name": e.name,
            "value": expr_to_json(e.value),
            "body": expr_to_json(e.body),
            "recursive": e.recursive,
        }
    elif isinstance(e, If):
        return {
            "type": "if",
            "cond": expr_to_json(e.cond),
            "then": expr_to_json(e.then),
            "orelse": expr_to_json(e.orelse),
        }
    elif isinstance(e, Match):
        return {
            "type": "match",
            "scrutinee": expr_to_json(e.scrutinee),
            "arms": [
                {"pattern": pattern_to_json(a.pattern), "body": expr_to_json(a.body)}
                for a in e.arms
            ],
        }
    raise TypeError(f"Unknown expression type: {type(e)}")


def expr_from_json(d: dict[str, Any]) -> Expr:
    t = d["type"]
    if t == "var":
        return Var(name=d["name"])
    elif t == "lit":
        value = d["value"]
        if value is not None and not isinstance(value, (bool, int, float, str)):
            raise ValueError(f"Literal must be a primitive, got {type(value).__name__}")
        return Lit(value=value)
    elif t == "lam":
        return Lam(params=tuple(d["params"]), body=expr_from_json(d["body"]))
    elif t == "app":
        return App(
            fn=expr_from_json(d["fn"]),
            args=tuple(expr_from_json(a) for a in d["args"]),
        )
    elif t == "construct":
        return Construct(
            tag=d["tag"], args=tuple(expr_from_json(a) for a in d.get("args", []))
        )
    elif t == "invoke":
        return Invoke(
            method=d["method"],
            args=tuple(expr_from_json(a) for a in d["args"]),
            type_hint=d.get("type_hint"),
        )
    elif t == "let":
        return Let(
            name=d["name"],
            value=expr_from_json(d["value"]),
            body=expr_from_json(d["body"]),
            recursive=bool(d.get("recursive", False)),
        )
    elif t == "if":
        return If(
            cond=expr_from_json(d["cond"]),
            then=expr_from_json(d["then"]),
            orelse=expr_from_json(d["orelse"]),
        )
    elif t == "match":
        return Match(
            scrutinee=expr_from_json(d["scrutinee"]),
            arms=tuple(
                Arm(pattern=pattern_from_json(a["pattern"]), body=expr_from_json(a["body"]))
                for a in d["arms"]
            ),
        )
    raise ValueError(f"Unknown expression type: {t}")


# ---------------------------------------------------------------------------
# Convenience: dump / load as JSON strings
# ---------------------------------------------------------------------------


def dumps_expr(e: Expr) -> str:
    return json.dumps(expr_to_json(e), indent=2)


def loads_expr(s: str) -> Expr:
    return expr_from_json(json.loads(s))


def dumps_value(v: Any) -> str:
    return json.dumps(value_to_json(v))


def loads_value(s: str) -> Any:
    return value_from_json(json.loads(s))
