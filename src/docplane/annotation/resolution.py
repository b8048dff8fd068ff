"""Dynamic lookup of data providers and named constants.

The engine only talks to the ``SymbolResolver`` and ``ConstantResolver``
protocols. ``PythonSymbolResolver`` is the default implementation and
resolves dotted (or backslash separated) names with ``importlib``.
"""

from __future__ import annotations

import importlib
import inspect
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog

from docplane.core.errors import ResolutionError

logger = structlog.get_logger()


@dataclass(frozen=True)
class TypeHandle:
    name: str
    target: Any


@dataclass(frozen=True)
class MemberHandle:
    owner: TypeHandle
    name: str
    is_static: bool
    parameter_count: int


@runtime_checkable
class SymbolResolver(Protocol):
    """Capability used to find and call data providers."""

    def resolve_type(self, name: str) -> TypeHandle:
        """Find a type by (optionally namespaced) name. Raises ResolutionError."""
        ...

    def resolve_member(self, owner: TypeHandle, name: str) -> MemberHandle:
        """Find a member of a resolved type. Raises ResolutionError."""
        ...

    def instantiate(self, owner: TypeHandle) -> Any:
        """Construct an instance for a non-static member. Raises ResolutionError."""
        ...

    def invoke(self, member: MemberHandle, instance: Any, args: tuple[Any, ...]) -> Any:
        """Call the member, bound to ``instance`` when it is not static."""
        ...


@runtime_checkable
class ConstantResolver(Protocol):
    def try_resolve_constant(self, text: str) -> Any | None:
        """Value of the constant named by ``text``, or None if there is none."""
        ...


class PythonSymbolResolver:
    """Resolve provider references against importable Python modules.

    ``pkg.mod.Type`` and ``pkg\\mod\\Type`` are equivalent. A name without a
    module path is looked up in ``default_module`` and then in each of
    ``search_modules`` (usually the module of the declaring test class).
    """

    def __init__(
        self,
        default_module: str | None = None,
        search_modules: tuple[str, ...] = (),
        instantiate_providers: bool = True,
    ) -> None:
        self._search_modules = tuple(
            m for m in (default_module, *search_modules) if m is not None
        )
        self._instantiate_providers = instantiate_providers

    def resolve_type(self, name: str) -> TypeHandle:
        dotted = name.replace("\\", ".").strip(".")
        relative = [f"{module}.{dotted}" for module in self._search_modules]
        # Bare names prefer the search modules; dotted names are tried as absolute first
        candidates = [*relative, dotted] if "." not in dotted else [dotted, *relative]
        for candidate in candidates:
            target = self._import_attribute(candidate)
            if target is not None:
                return TypeHandle(name=candidate, target=target)
        raise ResolutionError.type_not_found(dotted, "not importable from any search module")

    def _import_attribute(self, path: str) -> Any | None:
        # Walk back so modules, classes and nested classes (pkg.mod.Outer.Inner) all resolve.
        parts = path.split(".")
        for split in range(len(parts), 0, -1):
            try:
                target: Any = importlib.import_module(".".join(parts[:split]))
            except ImportError:
                continue
            for part in parts[split:]:
                target = getattr(target, part, None)
                if target is None:
                    return None
            return target
        return None

    def resolve_member(self, owner: TypeHandle, name: str) -> MemberHandle:
        raw = inspect.getattr_static(owner.target, name, None)
        if raw is None:
            raise ResolutionError.member_not_found(owner.name, name)
        is_static = isinstance(raw, (staticmethod, classmethod)) or not inspect.isclass(
            owner.target
        )
        func = getattr(owner.target, name)
        if not callable(func):
            raise ResolutionError.member_not_found(owner.name, name)
        params = list(inspect.signature(func).parameters.values())
        if not is_static and params:
            params = params[1:]  # self
        return MemberHandle(
            owner=owner,
            name=name,
            is_static=is_static,
            parameter_count=len(params),
        )

    def instantiate(self, owner: TypeHandle) -> Any:
        if not self._instantiate_providers:
            raise ResolutionError.instantiation_failed(
                owner.name, "provider instantiation is disabled"
            )
        try:
            return owner.target()
        except TypeError as e:
            raise ResolutionError.instantiation_failed(owner.name, str(e)) from e

    def invoke(self, member: MemberHandle, instance: Any, args: tuple[Any, ...]) -> Any:
        bound = member.owner.target if member.is_static or instance is None else instance
        logger.debug(
            "data_provider_invoked",
            provider=f"{member.owner.name}::{member.name}",
            static=member.is_static,
            args=len(args),
        )
        return getattr(bound, member.name)(*args)


class PythonConstantResolver:
    """Resolve ``Type::CONST`` (or ``module::CONST``) by attribute lookup."""

    def __init__(self, symbols: PythonSymbolResolver | None = None) -> None:
        self._symbols = symbols or PythonSymbolResolver()

    def try_resolve_constant(self, text: str) -> Any | None:
        if text.count("::") != 1:
            return None
        type_name, _, constant = text.partition("::")
        if not type_name or not constant:
            return None
        try:
            owner = self._symbols.resolve_type(type_name)
        except ResolutionError:
            return None
        return getattr(owner.target, constant, None)
