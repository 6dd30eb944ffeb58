"""Algebraic data type declarations.

A data type is a named sum of tagged constructors, each carrying a product
of fields:

    Maybe a  = Nothing | Just a
    List a   = Nil | Cons a (List a)
    Writer w a = Writer a w

Type expressions on fields are informational. The evaluator is dynamically
typed; `check` only verifies that every name mentioned in a field type is a
type parameter or a declared type.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import NewType

# ---------------------------------------------------------------------------
# Type references
# ---------------------------------------------------------------------------

TypeRef = NewType("TypeRef", str)

PRIMITIVE_TYPES: frozenset[str] = frozenset({"Int", "Float", "String", "Bool", "Unit"})

_TYPE_TOKEN = re.compile(r"[A-Za-z_][A-Za-z0-9_']*")


def type_names_in(type_expr: str) -> tuple[str, ...]:
    """Return every identifier mentioned in a type expression, in order.

    >>> type_names_in("List (Maybe a)")
    ('List', 'Maybe', 'a')
    """
    return tuple(_TYPE_TOKEN.findall(type_expr))


def is_type_param(name: str) -> bool:
    return name[:1].islower()


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDecl:
    """A named field of a constructor.

    Example: head : a  → FieldDecl("head", "a")
    """

    name: str
    type_expr: str


@dataclass(frozen=True)
class ConstructorDecl:
    """A tagged alternative of a data type.

    Example: Cons a (List a) → ConstructorDecl("Cons", (FieldDecl("head", "a"),
                                                        FieldDecl("tail", "List a")))
    """

    tag: str
    fields: tuple[FieldDecl, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class DataType:
    """A sum of constructors, optionally parameterised by type variables."""

    name: TypeRef
    params: tuple[str, ...]
    constructors: tuple[ConstructorDecl, ...]

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(c.tag for c in self.constructors)

    def constructor(self, tag: str) -> ConstructorDecl | None:
        for c in self.constructors:
            if c.tag == tag:
                return c
        return None


# ---------------------------------------------------------------------------
# Type environment
# ---------------------------------------------------------------------------


class TypeEnv:
    """Lookup of data types by name and of constructors by tag.

    When two types declare the same tag, the first declaration wins for
    lookup; `check_types` reports the clash.
    """

    def __init__(self, data_types: Mapping[str, DataType] | Iterable[DataType]) -> None:
        if isinstance(data_types, Mapping):
            types = dict(data_types)
        else:
            types = {dt.name: dt for dt in data_types}
        self._types: Mapping[str, DataType] = MappingProxyType(types)
        ctors: dict[str, tuple[DataType, ConstructorDecl]] = {}
        for dt in types.values():
            for c in dt.constructors:
                ctors.setdefault(c.tag, (dt, c))
        self._ctors = MappingProxyType(ctors)

    @property
    def data_types(self) -> Mapping[str, DataType]:
        return self._types

    def get_type(self, name: str) -> DataType | None:
        return self._types.get(name)

    def get_constructor(self, tag: str) -> tuple[DataType, ConstructorDecl] | None:
        return self._ctors.get(tag)

    def is_known_type(self, name: str) -> bool:
        return name in self._types or name in PRIMITIVE_TYPES

    @property
    def type_names(self) -> frozenset[str]:
        return frozenset(self._types.keys())

    def extend(self, *data_types: DataType) -> TypeEnv:
        """Return a new environment with extra (or replacing) declarations."""
        merged = dict(self._types)
        for dt in data_types:
            merged[dt.name] = dt
        return TypeEnv(merged)
