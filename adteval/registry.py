"""Instance registry: (type name, interface name) → method implementations.

Resolution is exact on the type name. There is no defaulting, no
subtyping, and no search through superclasses: asking for ``Functor List``
finds the ``Functor List`` instance or fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import (
    DuplicateInstanceError,
    DuplicateInterfaceError,
    NoInstanceError,
    UnknownInterfaceError,
    UnknownMethodError,
)
from .interfaces import Interface

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Instance:
    """Method implementations of one interface for one type.

    Example:
        Instance("Maybe", "Functor", {"map": Builtin("map@Maybe", 2, ...)})
    """

    type_name: str
    interface: str
    methods: Mapping[str, Any]

    @property
    def key(self) -> tuple[str, str]:
        return (self.type_name, self.interface)


class InstanceRegistry:
    """Declared interfaces and the instances registered against them."""

    def __init__(self, interfaces: Iterable[Interface] = ()) -> None:
        self._interfaces: dict[str, Interface] = {}
        self._method_owner: dict[str, str] = {}
        self._instances: dict[tuple[str, str], Instance] = {}
        for iface in interfaces:
            self.declare_interface(iface)

    # -- interfaces ---------------------------------------------------------

    def declare_interface(self, iface: Interface) -> None:
        if iface.name in self._interfaces:
            raise DuplicateInterfaceError(iface.name)
        self._interfaces[iface.name] = iface
        for name in iface.all_names:
            owner = self._method_owner.get(name)
            if owner is not None:
                # first declaration keeps the name; check_registry reports it
                logger.warning(
                    "Method %r of %s shadowed by earlier interface %s",
                    name, iface.name, owner,
                )
                continue
            self._method_owner[name] = iface.name

    def get_interface(self, name: str) -> Interface | None:
        return self._interfaces.get(name)

    @property
    def interfaces(self) -> Mapping[str, Interface]:
        return MappingProxyType(self._interfaces)

    def interface_for(self, method: str) -> Interface:
        """The interface that declares ``method`` (aliases included)."""
        owner = self._method_owner.get(method)
        if owner is None:
            raise UnknownMethodError(method)
        return self._interfaces[owner]

    # -- instances ----------------------------------------------------------

    def register(self, instance: Instance, *, replace: bool = False) -> None:
        if instance.interface not in self._interfaces:
            raise UnknownInterfaceError(instance.interface)
        if instance.key in self._instances:
            if not replace:
                raise DuplicateInstanceError(instance.type_name, instance.interface)
            logger.warning(
                "Replacing instance %s %s", instance.interface, instance.type_name
            )
        self._instances[instance.key] = Instance(
            type_name=instance.type_name,
            interface=instance.interface,
            methods=MappingProxyType(dict(instance.methods)),
        )
        logger.debug("Registered instance %s %s", instance.interface, instance.type_name)

    def lookup(self, type_name: str, interface: str) -> Instance | None:
        return self._instances.get((type_name, interface))

    def resolve(self, type_name: str, interface: str) -> Instance:
        if interface not in self._interfaces:
            raise UnknownInterfaceError(interface)
        inst = self._instances.get((type_name, interface))
        if inst is None:
            raise NoInstanceError(type_name, interface)
        return inst

    def has_instance(self, type_name: str, interface: str) -> bool:
        return (type_name, interface) in self._instances

    @property
    def instances(self) -> tuple[Instance, ...]:
        return tuple(self._instances.values())

    def instances_for(self, type_name: str) -> tuple[Instance, ...]:
        return tuple(i for i in self._instances.values() if i.type_name == type_name)

    def __iter__(self) -> Iterator[Instance]:
        return iter(self.instances)

    def __len__(self) -> int:
        return len(self._instances)

    def copy(self) -> InstanceRegistry:
        """An independent registry with the same interfaces and instances."""
        other = InstanceRegistry(self._interfaces.values())
        other._instances = dict(self._instances)
        return other
