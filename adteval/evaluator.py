"""Environment-passing evaluator with interface dispatch.

Evaluation is call-by-value with two exceptions:
  - ``If`` and ``Match`` evaluate only the selected branch
  - the accumulator handed to a ``foldr`` combining function is a
    ``Thunk``; it is forced only if the function (or a builtin it calls)
    needs its value

Data constructors are strict: every field is forced when the value is
built, so a ``Data`` never holds a ``Thunk``.

Method invocations (``Invoke``) are resolved through the
``InstanceRegistry`` on the runtime type of the method's dispatch argument,
or on an explicit type annotation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .config import Settings
from .errors import (
    AmbiguousDispatchError,
    ConstructorArityError,
    DispatchError,
    EvalDepthError,
    EvalError,
    MatchError,
    MethodArityError,
    MissingMethodError,
    NotCallableError,
    RegistryError,
    TypeMismatchError,
    UnboundVariableError,
    UnknownConstructorError,
)
from .expr import (
    App,
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
from .registry import InstanceRegistry
from .result import Err, Ok, Result
from .show import show
from .types import TypeEnv
from .values import (
    Builtin,
    Closure,
    Data,
    Partial,
    Thunk,
    is_callable_value,
    type_of,
)

logger = logging.getLogger(__name__)

Env = Mapping[str, Any]


class Evaluator:
    """Evaluates expressions against a type environment and an instance registry.

    ``globals`` are visible from every expression (the prelude builtins, by
    default); local bindings shadow them.
    """

    def __init__(
        self,
        types: TypeEnv,
        registry: InstanceRegistry,
        globals: Mapping[str, Any] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.types = types
        self.registry = registry
        self.globals: dict[str, Any] = dict(globals or {})
        self.settings = settings or Settings()
        self._depth = 0

    # -- entry points -------------------------------------------------------

    def run(self, expr: Expr, env: Env | None = None) -> Result[Any, EvalError]:
        """Evaluate and force ``expr``; failures come back as ``Err``."""
        try:
            return Ok(self.force(self.evaluate(expr, env)))
        except EvalError as e:
            return Err(e)
        except RecursionError:
            self._depth = 0
            return Err(EvalDepthError("Host recursion limit reached during evaluation"))

    def evaluate(self, expr: Expr, env: Env | None = None) -> Any:
        self._depth += 1
        try:
            if self._depth > self.settings.max_depth:
                raise EvalDepthError(
                    f"Evaluation exceeded maximum depth {self.settings.max_depth}"
                )
            return self._eval(expr, {} if env is None else env)
        except RecursionError as e:
            if self._depth == 1:
                raise EvalDepthError("Host recursion limit reached during evaluation") from e
            raise
        finally:
            self._depth -= 1

    # -- expressions --------------------------------------------------------

    def _eval(self, expr: Expr, env: Env) -> Any:
        match expr:
            case Lit(value):
                return value
            case Var(name):
                if name in env:
                    return env[name]
                if name in self.globals:
                    return self.globals[name]
                raise UnboundVariableError(name)
            case Lam(params, body):
                return Closure(params, body, env)
            case App(fn, args):
                f = self.evaluate(fn, env)
                return self.apply(f, tuple(self.evaluate(a, env) for a in args))
            case Construct(tag, args):
                return self.construct(tag, tuple(self.evaluate(a, env) for a in args))
            case Invoke(method, args, type_hint):
                return self.invoke(
                    method, tuple(self.evaluate(a, env) for a in args), type_hint
                )
            case Let(name, value, body, recursive):
                if not recursive:
                    return self.evaluate(body, {**env, name: self.evaluate(value, env)})
                inner: dict[str, Any] = dict(env)
                match value:
                    case Lam(params, lam_body):
                        bound: Any = Closure(params, lam_body, inner, name=name)
                    case _:
                        bound = self.evaluate(value, inner)
                inner[name] = bound
                return self.evaluate(body, inner)
            case If(cond, then, orelse):
                flag = self.force(self.evaluate(cond, env))
                if not isinstance(flag, bool):
                    raise TypeMismatchError(f"if: condition is {type_of(flag)}, not Bool")
                return self.evaluate(then if flag else orelse, env)
            case Match(scrutinee, arms):
                value = self.force(self.evaluate(scrutinee, env))
                for arm in arms:
                    bindings = self._match(arm.pattern, value)
                    if bindings is not None:
                        return self.evaluate(arm.body, {**env, **bindings})
                raise MatchError(f"No arm matches {show(value)}")
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _match(self, pattern: Pattern, value: Any) -> dict[str, Any] | None:
        match pattern:
            case PWild():
                return {}
            case PVar(name):
                return {name: value}
            case PCon(tag, binders):
                if not isinstance(value, Data) or value.tag != tag:
                    return None
                if len(binders) != len(value.args):
                    raise MatchError(
                        f"Pattern {tag} binds {len(binders)} fields, "
                        f"constructor has {len(value.args)}"
                    )
                return {b: a for b, a in zip(binders, value.args, strict=True) if b != "_"}
        raise TypeError(f"Unknown pattern type: {type(pattern).__name__}")

    # -- values -------------------------------------------------------------

    def construct(self, tag: str, args: Iterable[Any]) -> Data:
        found = self.types.get_constructor(tag)
        if found is None:
            raise UnknownConstructorError(tag)
        dt, ctor = found
        fields = tuple(self.force(a) for a in args)
        if len(fields) != ctor.arity:
            raise ConstructorArityError(tag, ctor.arity, len(fields))
        return Data(dt.name, tag, fields)

    def force(self, value: Any) -> Any:
        while isinstance(value, Thunk):
            value = value.force()
        return value

    def force_deep(self, value: Any) -> Any:
        """Force a value and every field beneath it.

        Walks the last field iteratively so long right-nested spines
        (lists) do not recurse once per element.
        """
        value = self.force(value)
        spine: list[Data] = []
        while isinstance(value, Data) and value.args:
            spine.append(value)
            value = self.force(value.args[-1])
        result = value
        for node in reversed(spine):
            init = tuple(self.force_deep(a) for a in node.args[:-1])
            result = Data(node.type_name, node.tag, init + (result,))
        return result

    def apply(self, fn: Any, args: Iterable[Any]) -> Any:
        """Apply a function value to arguments, currying as needed."""
        fn = self.force(fn)
        args = tuple(args)
        match fn:
            case Partial(inner, bound):
                return self.apply(inner, bound + args)
            case Closure() | Builtin():
                n = fn.arity
                if len(args) < n:
                    return Partial(fn, args) if args else fn
                now, rest = args[:n], args[n:]
                if isinstance(fn, Closure):
                    result = self.evaluate(fn.body, {**fn.env, **dict(zip(fn.params, now))})
                else:
                    result = fn.impl(self, *now)
                return self.apply(result, rest) if rest else result
            case _ if is_callable_value(fn):
                return fn(*(self.force(a) for a in args))
        raise NotCallableError(f"{show(fn)} is not a function")

    # -- dispatch -----------------------------------------------------------

    def invoke(self, method: str, args: Iterable[Any], type_hint: str | None = None) -> Any:
        """Resolve ``method`` for the dispatch type and apply the implementation."""
        args = tuple(args)
        try:
            iface = self.registry.interface_for(method)
        except RegistryError as e:
            raise DispatchError(str(e)) from e
        sig = iface.method(method)
        assert sig is not None
        if len(args) != sig.arity:
            raise MethodArityError(method, sig.arity, len(args))

        target = None
        if sig.dispatch is not None:
            # implementations see the dispatch argument forced, hinted or not
            target = self.force(args[sig.dispatch])
            args = args[: sig.dispatch] + (target,) + args[sig.dispatch + 1 :]

        if type_hint is not None:
            type_name = type_hint
        elif sig.dispatch is not None:
            type_name = type_of(target)
        elif sig.default_type is not None:
            type_name = sig.default_type
        else:
            raise AmbiguousDispatchError(method)

        try:
            instance = self.registry.resolve(type_name, iface.name)
        except RegistryError as e:
            raise DispatchError(f"{method}: {e}") from e
        impl = instance.methods.get(sig.name)
        if impl is None:
            raise DispatchError(str(MissingMethodError(type_name, iface.name, sig.name)))

        if self.settings.trace_dispatch:
            logger.debug("dispatch %s.%s @ %s", iface.name, sig.name, type_name)

        if sig.arity == 0 and not is_callable_value(impl):
            return impl
        return self.apply(impl, args)

    # -- operations ---------------------------------------------------------

    def map(self, f: Any, fa: Any) -> Any:
        return self.force(self.invoke("map", (f, fa)))

    def bind(self, ma: Any, f: Any) -> Any:
        return self.force(self.invoke("bind", (ma, f)))

    def monad_map(self, ma: Any, f: Any) -> Any:
        """Same as ``bind``."""
        return self.force(self.invoke("monadMap", (ma, f)))

    def pure(self, x: Any, type_name: str) -> Any:
        return self.force(self.invoke("pure", (x,), type_name))

    def then(self, ma: Any, mb: Any) -> Any:
        """Sequence two monadic values, keeping the effects of both and the result of ``mb``."""
        return self.bind(ma, Builtin("then", 1, lambda ev, _: mb))

    def join(self, mma: Any) -> Any:
        return self.bind(mma, Builtin("id", 1, lambda ev, x: x))

    def foldr(self, f: Any, z: Any, t: Any) -> Any:
        return self.force(self.invoke("foldr", (f, z, t)))

    def foldl(self, f: Any, z: Any, t: Any) -> Any:
        return self.force(self.invoke("foldl", (f, z, t)))

    def fold(self, f: Any, seed: Any, t: Any) -> Any:
        """Reduce a foldable to one value with a combining function and a seed.

        Strict left-to-right reduction; the result is fully forced. For an
        associative ``f`` this agrees with ``foldr``.
        """
        return self.force_deep(self.invoke("foldl", (f, seed, t)))

    def mappend(self, a: Any, b: Any) -> Any:
        return self.force(self.invoke("mappend", (a, b)))

    def mempty(self, type_name: str | None = None) -> Any:
        return self.force(self.invoke("mempty", (), type_name))
