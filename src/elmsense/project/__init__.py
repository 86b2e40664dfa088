"""Project discovery: manifests, dependencies and the package cache."""

from elmsense.project.fs import ReadResult, find_manifests, read_text
from elmsense.project.manifest import ManifestLoader
from elmsense.project.models import (
    Dependency,
    DocEntry,
    ModuleDocs,
    ProjectDefinition,
    ProjectKind,
)
from elmsense.project.paths import package_cache_root, resolve_version
from elmsense.project.registry import ProjectRegistry

__all__ = [
    "ManifestLoader",
    "ProjectRegistry",
    "ProjectDefinition",
    "ProjectKind",
    "Dependency",
    "DocEntry",
    "ModuleDocs",
    "ReadResult",
    "find_manifests",
    "read_text",
    "package_cache_root",
    "resolve_version",
]
