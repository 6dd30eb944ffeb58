"""Render runtime values the way the tutorial writes them."""

from __future__ import annotations

import json
from typing import Any

from .values import Builtin, Closure, Data, Partial, Thunk


def show(value: Any) -> str:
    """Human-readable rendering.

    >>> show(Data("Maybe", "Just", (3,)))
    'Just 3'
    """
    match value:
        case bool():
            return "True" if value else "False"
        case None:
            return "()"
        case int() | float():
            return repr(value)
        case str():
            return json.dumps(value, ensure_ascii=False)
        case Data(type_name="List") if (items := _list_items(value)) is not None:
            return "[" + ", ".join(show(x) for x in items) + "]"
        case Data(type_name="Writer", args=(a, w)):
            return f"Writer ({show(a)}, {show(w)})"
        case Data(type_name="Mempty"):
            return "mempty"
        case Data(tag=tag, args=()):
            return tag
        case Data(tag=tag, args=args):
            return " ".join([tag, *(_show_arg(a) for a in args)])
        case Closure(name=str(name)):
            return f"<lambda {name}/{value.arity}>"
        case Closure():
            return f"<lambda/{value.arity}>"
        case Builtin(name=name):
            return f"<builtin {name}>"
        case Partial(fn=fn):
            label = fn.name if fn.name else "lambda"
            return f"<partial {label}/{value.remaining}>"
        case Thunk():
            return "<thunk>"
    return repr(value)


def _list_items(value: Data) -> list[Any] | None:
    """Elements of a Cons/Nil spine, or None when the spine does not end in Nil."""
    items = []
    node: Any = value
    while True:
        match node:
            case Data(type_name="List", tag="Cons", args=(head, tail)):
                items.append(head)
                node = tail
            case Data(type_name="List", tag="Nil"):
                return items
            case _:
                return None


def _show_arg(value: Any) -> str:
    text = show(value)
    match value:
        case Data(type_name="List") if text.startswith("["):
            return text
        case Data(type_name="Writer" | "Mempty"):
            return text
        case Data(args=args) if args:
            return f"({text})"
        case int() | float() if not isinstance(value, bool) and value < 0:
            return f"({text})"
    return text
