"""Module parsing, caching and name resolution."""

from elmsense.modules.cache import ModuleCache
from elmsense.modules.models import (
    CustomType,
    Exposing,
    ExposedView,
    FunctionDeclaration,
    ModuleCacheEntry,
    ModuleDescriptor,
    ModuleImport,
    ModuleKind,
    TypeAlias,
)
from elmsense.modules.parser import exposed_surface, parse_exposing, parse_module
from elmsense.modules.resolver import ModuleResolver

__all__ = [
    "ModuleCache",
    "ModuleCacheEntry",
    "ModuleResolver",
    "ModuleDescriptor",
    "ModuleImport",
    "ModuleKind",
    "Exposing",
    "ExposedView",
    "FunctionDeclaration",
    "CustomType",
    "TypeAlias",
    "exposed_surface",
    "parse_exposing",
    "parse_module",
]
