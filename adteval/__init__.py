"""adteval: Evaluate expressions over algebraic data types with interface dispatch."""

from .types import (
    ConstructorDecl,
    DataType,
    FieldDecl,
    TypeEnv,
    TypeRef,
)
from .values import (
    MEMPTY,
    Builtin,
    Closure,
    Data,
    Partial,
    Thunk,
    type_of,
    values_equal,
)
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
    PCon,
    PVar,
    PWild,
    Var,
)
from .interfaces import (
    FOLDABLE,
    FUNCTOR,
    MONAD,
    MONOID,
    STANDARD_INTERFACES,
    Interface,
    MethodSig,
)
from .registry import Instance, InstanceRegistry
from .config import Settings
from .evaluator import Evaluator
from .prelude import (
    BUILTINS,
    default_evaluator,
    default_registry,
    default_types,
    from_list,
    just,
    nothing,
    to_list,
    writer,
)
from .show import show
from .serialization import dumps_expr, dumps_value, loads_expr, loads_value
from .result import Ok, Err, Result

__all__ = [
    # Types
    "ConstructorDecl", "DataType", "FieldDecl", "TypeEnv", "TypeRef",
    # Values
    "MEMPTY", "Builtin", "Closure", "Data", "Partial", "Thunk", "type_of",
    "values_equal",
    # Expressions
    "App", "Arm", "Construct", "Expr", "If", "Invoke", "Lam", "Let", "Lit",
    "Match", "PCon", "PVar", "PWild", "Var",
    # Interfaces and instances
    "FOLDABLE", "FUNCTOR", "MONAD", "MONOID", "STANDARD_INTERFACES",
    "Interface", "MethodSig", "Instance", "InstanceRegistry",
    # Evaluation
    "Settings", "Evaluator",
    # Prelude
    "BUILTINS", "default_evaluator", "default_registry", "default_types",
    "from_list", "just", "nothing", "to_list", "writer",
    # Rendering and serialization
    "show", "dumps_expr", "dumps_value", "loads_expr", "loads_value",
    # Result
    "Ok", "Err", "Result",
]
