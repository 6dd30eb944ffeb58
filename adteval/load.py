from __future__ import annotations

import json

from adteval.expr import Expr
from adteval.serialization import expr_from_json


def load_expr_from_file(path: str) -> Expr | str:
    """Read a JSON program and return its expression.

    The file holds either a bare expression object or a program wrapper
    ``{"type": "program", "name": ..., "body": <expression>}``.

    Returns the :class:`~adteval.expr.Expr` on success, or an error string
    on any failure.
    """
    try:
        with open(path, encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        return f"Could not read file: {e}"

    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        return f"Invalid JSON: {e}"

    match data:
        case {"type": "program", "body": dict(body)}:
            pass
        case {"type": str()}:
            body = data
        case _:
            return "Expected a JSON object with a 'type' field"

    try:
        return expr_from_json(body)
    except (KeyError, TypeError, ValueError) as e:
        return f"Malformed program: {type(e).__name__}: {e}"
