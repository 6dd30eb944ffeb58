"""Generate a Markdown reference of the declared types, interfaces and instances.

Run: python -m adteval.reference > REFERENCE.md
"""

from __future__ import annotations

from dataclasses import dataclass

from adteval.interfaces import Interface
from adteval.prelude import BUILTINS, default_registry, default_types
from adteval.registry import InstanceRegistry
from adteval.render import render
from adteval.types import DataType, TypeEnv


@dataclass(frozen=True)
class _TypeRow:
    name: str
    declaration: str
    instances: tuple[str, ...]


def format_data_type(dt: DataType) -> str:
    """``Maybe a = Nothing | Just a``"""
    head = " ".join([dt.name, *dt.params])
    alts = []
    for c in dt.constructors:
        parts = [c.tag]
        for f in c.fields:
            parts.append(f"({f.type_expr})" if " " in f.type_expr else f.type_expr)
        alts.append(" ".join(parts))
    return f"{head} = {' | '.join(alts)}"


def format_method(iface: Interface, name: str) -> str:
    sig = iface.method(name)
    assert sig is not None
    if sig.dispatch is not None:
        how = f"dispatches on `{sig.params[sig.dispatch]}`"
    elif sig.default_type is not None:
        how = f"needs a type annotation (default `{sig.default_type}`)"
    else:
        how = "needs a type annotation"
    return f"{sig.name}({', '.join(sig.params)}): {how}"


def generate_reference(
    types: TypeEnv | None = None,
    registry: InstanceRegistry | None = None,
    builtins: list[str] | None = None,
) -> str:
    types = types or default_types()
    registry = registry or default_registry()
    names = sorted(BUILTINS) if builtins is None else builtins

    type_names = sorted(set(types.type_names) | {i.type_name for i in registry.instances})
    rows = []
    for name in type_names:
        dt = types.get_type(name)
        rows.append(
            _TypeRow(
                name=name,
                declaration=format_data_type(dt) if dt is not None else f"{name} (primitive)",
                instances=tuple(sorted(i.interface for i in registry.instances_for(name))),
            )
        )

    interfaces = [
        {
            "name": iface.name,
            "superclasses": iface.superclasses,
            "methods": [format_method(iface, m) for m in iface.method_names],
            "aliases": sorted(iface.aliases.items()),
        }
        for iface in registry.interfaces.values()
    ]

    return render("reference.md.j2", types=rows, interfaces=interfaces, builtins=names)


if __name__ == "__main__":
    print(generate_reference())
