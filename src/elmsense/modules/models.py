"""Module structure models produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ModuleKind(Enum):
    PLAIN = "module"
    PORT = "port"
    EFFECT = "effect"


@dataclass(frozen=True, slots=True)
class Exposing:
    """An ``exposing (...)`` list.

    ``types`` maps each exposed type name to whether its constructors are
    exposed too (``Type(..)``).
    """

    all: bool = False
    values: frozenset[str] = frozenset()
    types: dict[str, bool] = field(default_factory=dict, hash=False)
    operators: frozenset[str] = frozenset()

    @classmethod
    def everything(cls) -> Exposing:
        return cls(all=True)

    def exposes_value(self, name: str) -> bool:
        return self.all or name in self.values

    def exposes_type(self, name: str) -> bool:
        return self.all or name in self.types

    def exposes_constructors(self, type_name: str) -> bool:
        return self.all or self.types.get(type_name, False)


@dataclass(frozen=True, slots=True)
class ModuleImport:
    module: str
    alias: str | None = None
    exposing: Exposing | None = None


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    name: str
    annotation: str | None = None
    is_port: bool = False


@dataclass(frozen=True, slots=True)
class CustomType:
    name: str
    constructors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TypeAlias:
    name: str


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    """Structure of one parsed module, together with the text it came from."""

    name: str
    text: str
    exposing: Exposing
    kind: ModuleKind = ModuleKind.PLAIN
    imports: tuple[ModuleImport, ...] = ()
    function_declarations: tuple[FunctionDeclaration, ...] = ()
    custom_types: tuple[CustomType, ...] = ()
    type_aliases: tuple[TypeAlias, ...] = ()


@dataclass(frozen=True, slots=True)
class ExposedView:
    """The part of a module visible to importers."""

    name: str
    functions: tuple[FunctionDeclaration, ...] = ()
    custom_types: tuple[CustomType, ...] = ()
    type_aliases: tuple[TypeAlias, ...] = ()


@dataclass(frozen=True, slots=True)
class ModuleCacheEntry:
    path: str
    module_name: str
    parsed: ModuleDescriptor
