"""Interfaces (typeclasses) and their method profiles.

An interface is a named set of methods. Each method says how its instance
is found at a call site:

  - ``dispatch = i``: by the runtime type of argument ``i``
    (``map f fa`` dispatches on ``fa``, index 1)
  - ``dispatch = None``: from an explicit type annotation
    (``pure x`` cannot know which monad it builds)

``default_type`` names the instance to use when a hint-dispatched method is
invoked without a hint. Only ``mempty`` has one: the polymorphic ``Mempty``
identity, which every monoid instance absorbs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

_NO_ALIASES: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True)
class MethodSig:
    """A method profile.

    Examples:
        map   : (a → b) × f a → f b        dispatch on argument 1
        bind  : m a × (a → m b) → m b      dispatch on argument 0
        pure  : a → m a                    needs a type annotation
    """

    name: str
    params: tuple[str, ...]
    dispatch: int | None
    default_type: str | None = None

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(frozen=True)
class Interface:
    """A typeclass: methods, superclasses, and alternative method names.

    An instance of an interface must exist for every superclass first:
    a Monad instance for Maybe presupposes a Functor instance for Maybe.
    """

    name: str
    methods: tuple[MethodSig, ...]
    superclasses: tuple[str, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=lambda: _NO_ALIASES)

    def method(self, name: str) -> MethodSig | None:
        """Look up a method by name or alias."""
        canonical = self.aliases.get(name, name)
        for m in self.methods:
            if m.name == canonical:
                return m
        return None

    @property
    def method_names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.methods)

    @property
    def all_names(self) -> tuple[str, ...]:
        """Method names plus aliases."""
        return self.method_names + tuple(self.aliases.keys())


# ---------------------------------------------------------------------------
# Standard interfaces
# ---------------------------------------------------------------------------

FUNCTOR = Interface(
    name="Functor",
    methods=(MethodSig("map", ("f", "fa"), dispatch=1),),
)

FOLDABLE = Interface(
    name="Foldable",
    methods=(
        MethodSig("foldr", ("f", "z", "t"), dispatch=2),
        MethodSig("foldl", ("f", "z", "t"), dispatch=2),
    ),
)

MONAD = Interface(
    name="Monad",
    methods=(
        MethodSig("pure", ("x",), dispatch=None),
        MethodSig("bind", ("ma", "f"), dispatch=0),
    ),
    superclasses=("Functor",),
    aliases=MappingProxyType({"monadMap": "bind"}),
)

MONOID = Interface(
    name="Monoid",
    methods=(
        MethodSig("mempty", (), dispatch=None, default_type="Mempty"),
        MethodSig("mappend", ("a", "b"), dispatch=0),
    ),
)

STANDARD_INTERFACES: tuple[Interface, ...] = (FUNCTOR, FOLDABLE, MONAD, MONOID)
