from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import UnknownMethodError
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
    PCon,
    PVar,
    PWild,
    Var,
)
from .registry import InstanceRegistry
from .types import TypeEnv, is_type_param, type_names_in


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    message: str
    path: str | None


@dataclass(frozen=True)
class CheckResult:
    subject: str
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def is_well_formed(self) -> bool:
        return len(self.errors) == 0


@dataclass
class CheckContext:
    types: TypeEnv
    registry: InstanceRegistry
    globals: frozenset[str] = frozenset()
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _scopes: list[set[str]] = field(default_factory=list)

    def error(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.ERROR, message, path))

    def warning(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.WARNING, message, path))

    def push_scope(self, names: Iterable[str] = ()) -> None:
        self._scopes.append(set(names))

    def bind(self, name: str) -> None:
        self._scopes[-1].add(name)

    def pop_scope(self) -> None:
        self._scopes.pop()

    def is_bound(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes) or name in self.globals


# ---------------------------------------------------------------------------
# Type declarations
# ---------------------------------------------------------------------------


def check_types(types: TypeEnv, ctx: CheckContext) -> None:
    seen_tags: dict[str, str] = {}
    for key, dt in types.data_types.items():
        path = f"types.{key}"
        if dt.name != key:
            ctx.error(
                "type_name_consistency",
                f"Type key '{key}' does not match DataType.name '{dt.name}'",
                path,
            )
        if len(set(dt.params)) != len(dt.params):
            ctx.error("type_param_unique", f"Type '{key}' repeats a type parameter", path)
        for p in dt.params:
            if not is_type_param(p):
                ctx.error(
                    "type_param_unique",
                    f"Type parameter '{p}' of '{key}' must start with a lowercase letter",
                    path,
                )
        for ctor in dt.constructors:
            cpath = f"{path}.{ctor.tag}"
            owner = seen_tags.get(ctor.tag)
            if owner is not None:
                ctx.error(
                    "constructor_unique",
                    f"Constructor '{ctor.tag}' declared by both '{owner}' and '{key}'",
                    cpath,
                )
            else:
                seen_tags[ctor.tag] = key
            for f in ctor.fields:
                for name in type_names_in(f.type_expr):
                    if is_type_param(name):
                        if name not in dt.params:
                            ctx.error(
                                "field_type_resolved",
                                f"Field '{f.name}' of '{ctor.tag}' uses type variable "
                                f"'{name}' not bound by '{key}'",
                                f"{cpath}.{f.name}",
                            )
                    elif not types.is_known_type(name):
                        ctx.error(
                            "field_type_resolved",
                            f"Field '{f.name}' of '{ctor.tag}' refers to unknown type '{name}'",
                            f"{cpath}.{f.name}",
                        )


# ---------------------------------------------------------------------------
# Interfaces and instances
# ---------------------------------------------------------------------------


def check_registry(registry: InstanceRegistry, ctx: CheckContext) -> None:
    owners: dict[str, str] = {}
    for iface in registry.interfaces.values():
        for name in iface.all_names:
            if name in owners:
                ctx.error(
                    "method_name_unique",
                    f"Method '{name}' declared by both '{owners[name]}' and '{iface.name}'",
                    f"interfaces.{iface.name}",
                )
            else:
                owners[name] = iface.name
        for sup in iface.superclasses:
            if sup not in registry.interfaces:
                ctx.error(
                    "instance_superclass",
                    f"Interface '{iface.name}' extends undeclared interface '{sup}'",
                    f"interfaces.{iface.name}",
                )

    for inst in registry.instances:
        path = f"instances.{inst.interface}.{inst.type_name}"
        if not ctx.types.is_known_type(inst.type_name):
            ctx.error(
                "instance_type_declared",
                f"Instance {inst.interface} {inst.type_name} is for an undeclared type",
                path,
            )
        iface = registry.get_interface(inst.interface)
        if iface is None:  # register() refuses these; guard for hand-built registries
            continue
        for name in iface.method_names:
            if name not in inst.methods:
                ctx.error(
                    "instance_complete",
                    f"Instance {inst.interface} {inst.type_name} is missing method '{name}'",
                    path,
                )
        for name in inst.methods:
            if name not in iface.method_names:
                ctx.warning(
                    "instance_method_known",
                    f"Instance {inst.interface} {inst.type_name} defines '{name}', "
                    f"which {inst.interface} does not declare",
                    path,
                )
        for sup in iface.superclasses:
            if not registry.has_instance(inst.type_name, sup):
                ctx.error(
                    "instance_superclass",
                    f"Instance {inst.interface} {inst.type_name} requires "
                    f"instance {sup} {inst.type_name}",
                    path,
                )


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def check_expr(expr: Expr, ctx: CheckContext, path: str) -> None:
    match expr:
        case Lit(value):
            if value is not None and not isinstance(value, (bool, int, float, str)):
                ctx.error(
                    "literal_primitive",
                    f"Literal of type {type(value).__name__} is not a primitive",
                    path,
                )
        case Var(name):
            if not ctx.is_bound(name):
                ctx.error("var_bound", f"Variable '{name}' is not bound", path)
        case Lam(params, body):
            if len(set(params)) != len(params):
                ctx.error("param_unique", f"Lambda repeats a parameter: {params}", path)
            ctx.push_scope(params)
            check_expr(body, ctx, f"{path}.body")
            ctx.pop_scope()
        case App(fn, args):
            check_expr(fn, ctx, f"{path}.fn")
            for i, a in enumerate(args):
                check_expr(a, ctx, f"{path}.args[{i}]")
        case Construct(tag, args):
            found = ctx.types.get_constructor(tag)
            if found is None:
                ctx.error("constructor_declared", f"Constructor '{tag}' is not declared", path)
            else:
                _, ctor = found
                if ctor.arity != len(args):
                    ctx.error(
                        "constructor_arity",
                        f"Constructor '{tag}' expects {ctor.arity} fields, got {len(args)}",
                        path,
                    )
            for i, a in enumerate(args):
                check_expr(a, ctx, f"{path}.args[{i}]")
        case Invoke(method, args, type_hint):
            _check_invoke(method, args, type_hint, ctx, path)
            for i, a in enumerate(args):
                check_expr(a, ctx, f"{path}.args[{i}]")
        case Let(name, value, body, recursive):
            ctx.push_scope([name] if recursive else [])
            check_expr(value, ctx, f"{path}.value")
            ctx.bind(name)
            check_expr(body, ctx, f"{path}.body")
            ctx.pop_scope()
        case If(cond, then, orelse):
            check_expr(cond, ctx, f"{path}.cond")
            check_expr(then, ctx, f"{path}.then")
            check_expr(orelse, ctx, f"{path}.orelse")
        case Match(scrutinee, arms):
            check_expr(scrutinee, ctx, f"{path}.scrutinee")
            _check_match(arms, ctx, path)
        case _:
            ctx.error(
                "expr_known",
                f"Expected an expression, got {type(expr).__name__}",
                path,
            )


def _check_invoke(
    method: str, args: tuple[Expr, ...], type_hint: str | None, ctx: CheckContext, path: str
) -> None:
    try:
        iface = ctx.registry.interface_for(method)
    except UnknownMethodError:
        ctx.error("method_declared", f"No interface declares method '{method}'", path)
        return
    sig = iface.method(method)
    assert sig is not None
    if sig.arity != len(args):
        ctx.error(
            "method_arity",
            f"Method '{method}' expects {sig.arity} arguments, got {len(args)}",
            path,
        )
    if type_hint is not None:
        if not ctx.registry.has_instance(type_hint, iface.name):
            ctx.error(
                "type_hint_instance",
                f"Annotation '{type_hint}' has no {iface.name} instance",
                path,
            )
    elif sig.dispatch is None and sig.default_type is None:
        ctx.error(
            "type_hint_required",
            f"Method '{method}' needs a type annotation to pick an instance",
            path,
        )


def _check_match(arms: tuple[Any, ...], ctx: CheckContext, path: str) -> None:
    if not arms:
        ctx.error("match_exhaustive", "Match has no arms", path)
        return
    arm_types: dict[str, str] = {}
    tags: set[str] = set()
    catch_all_at: int | None = None
    for i, a in enumerate(arms):
        apath = f"{path}.arms[{i}]"
        if catch_all_at is not None:
            ctx.warning(
                "match_unreachable",
                f"Arm {i} follows a catch-all arm at {catch_all_at}",
                apath,
            )
        binders: tuple[str, ...] = ()
        match a.pattern:
            case PCon(tag, binders):
                found = ctx.types.get_constructor(tag)
                if found is None:
                    ctx.error("constructor_declared", f"Constructor '{tag}' is not declared", apath)
                else:
                    dt, ctor = found
                    arm_types[tag] = dt.name
                    tags.add(tag)
                    if ctor.arity != len(binders):
                        ctx.error(
                            "pattern_arity",
                            f"Pattern '{tag}' binds {len(binders)} fields, "
                            f"constructor has {ctor.arity}",
                            apath,
                        )
                binders = tuple(b for b in binders if b != "_")
            case PVar(name):
                binders = (name,)
                catch_all_at = i if catch_all_at is None else catch_all_at
            case PWild():
                catch_all_at = i if catch_all_at is None else catch_all_at
        ctx.push_scope(binders)
        check_expr(a.body, ctx, f"{apath}.body")
        ctx.pop_scope()

    distinct = sorted(set(arm_types.values()))
    if len(distinct) > 1:
        ctx.error(
            "match_arm_type",
            f"Match arms mix constructors of {', '.join(distinct)}",
            path,
        )
    elif len(distinct) == 1 and catch_all_at is None:
        dt = ctx.types.get_type(distinct[0])
        if dt is not None:
            missing = [t for t in dt.tags if t not in tags]
            if missing:
                ctx.warning(
                    "match_exhaustive",
                    f"Match on {dt.name} does not cover {', '.join(missing)}",
                    path,
                )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def check_environment(types: TypeEnv, registry: InstanceRegistry) -> CheckResult:
    """Check the type declarations and the registry against each other."""
    ctx = CheckContext(types=types, registry=registry)
    check_types(types, ctx)
    check_registry(registry, ctx)
    return CheckResult("environment", tuple(ctx.diagnostics))


def check_program(
    expr: Expr,
    types: TypeEnv,
    registry: InstanceRegistry,
    globals: Mapping[str, Any] | Iterable[str] = (),
    name: str = "program",
) -> CheckResult:
    """Check an expression for scoping, constructor and method usage."""
    ctx = CheckContext(types=types, registry=registry, globals=frozenset(globals))
    check_expr(expr, ctx, "expr")
    return CheckResult(name, tuple(ctx.diagnostics))


