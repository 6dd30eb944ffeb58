"""Exception hierarchy for the registry and the evaluator."""

from __future__ import annotations


class AdtEvalError(Exception):
    """Base class for every error raised by adteval."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RegistryError(AdtEvalError):
    pass


class UnknownInterfaceError(RegistryError):
    def __init__(self, interface: str) -> None:
        super().__init__(f"Interface '{interface}' is not declared")
        self.interface = interface


class DuplicateInterfaceError(RegistryError):
    def __init__(self, interface: str) -> None:
        super().__init__(f"Interface '{interface}' is already declared")
        self.interface = interface


class DuplicateInstanceError(RegistryError):
    def __init__(self, type_name: str, interface: str) -> None:
        super().__init__(f"Instance {interface} {type_name} is already registered")
        self.type_name = type_name
        self.interface = interface


class NoInstanceError(RegistryError):
    def __init__(self, type_name: str, interface: str) -> None:
        super().__init__(f"No instance {interface} {type_name}")
        self.type_name = type_name
        self.interface = interface


class UnknownMethodError(RegistryError):
    def __init__(self, method: str) -> None:
        super().__init__(f"No interface declares a method '{method}'")
        self.method = method


class MissingMethodError(RegistryError):
    def __init__(self, type_name: str, interface: str, method: str) -> None:
        super().__init__(
            f"Instance {interface} {type_name} does not implement '{method}'"
        )
        self.type_name = type_name
        self.interface = interface
        self.method = method


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class EvalError(AdtEvalError):
    pass


class UnboundVariableError(EvalError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unbound variable '{name}'")
        self.name = name


class UnknownConstructorError(EvalError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Unknown constructor '{tag}'")
        self.tag = tag


class ConstructorArityError(EvalError):
    def __init__(self, tag: str, expected: int, got: int) -> None:
        super().__init__(f"Constructor '{tag}' expects {expected} fields, got {got}")
        self.tag = tag
        self.expected = expected
        self.got = got


class NotCallableError(EvalError):
    pass


class MethodArityError(EvalError):
    def __init__(self, method: str, expected: int, got: int) -> None:
        super().__init__(f"Method '{method}' expects {expected} arguments, got {got}")
        self.method = method
        self.expected = expected
        self.got = got


class AmbiguousDispatchError(EvalError):
    def __init__(self, method: str) -> None:
        super().__init__(
            f"Method '{method}' cannot infer its instance; give a type annotation"
        )
        self.method = method


class DispatchError(EvalError):
    """A method invocation resolved to no usable instance."""


class TypeMismatchError(EvalError):
    pass


class MatchError(EvalError):
    pass


class EvalDepthError(EvalError):
    pass
