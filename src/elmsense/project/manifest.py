"""Manifest discovery and project loading.

Scans workspace roots for ``elm.json`` / ``elm-package.json`` files and turns
each one into a :class:`ProjectDefinition`, reading the bundled documentation
of every direct dependency from the package cache.

All manifests load concurrently and each manifest loads its dependencies
concurrently; results keep discovery order. A manifest that cannot be read or
validated is dropped from the result, never raised.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from elmsense.config.constants import DEFAULT_PACKAGE_SOURCE_DIR
from elmsense.config.models import PackagesConfig, WorkspaceConfig
from elmsense.core.errors import ManifestError
from elmsense.core.excludes import prunable_dirs
from elmsense.core.logging import get_logger
from elmsense.project.fs import find_manifests, read_text
from elmsense.project.models import (
    PACKAGE_DOCS,
    Dependency,
    ManifestPayload,
    ProjectDefinition,
    ProjectKind,
)
from elmsense.project.paths import package_cache_root, resolve_version

log = get_logger("project.manifest")


class ManifestLoader:
    """Loads every project of a workspace."""

    def __init__(
        self,
        workspace: WorkspaceConfig,
        packages: PackagesConfig,
        *,
        os_name: str = sys.platform,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._workspace = workspace
        self._packages = packages
        self._os_name = os_name
        self._env = dict(os.environ if env is None else env)
        if packages.elm_home:
            self._env["ELM_HOME"] = packages.elm_home

    async def load_projects(self) -> list[ProjectDefinition]:
        """Discover and load all projects. Empty when no manifest is found."""
        manifests = await find_manifests(
            self._workspace.roots,
            self._workspace.manifest_names,
            prunable_dirs(self._workspace.excluded_dirs),
        )
        if not manifests:
            log.info("no_manifests_found", roots=self._workspace.roots)
            return []

        loaded = await asyncio.gather(*(self.load_project(m) for m in manifests))
        projects = [p for p in loaded if p is not None]
        log.info("projects_loaded", found=len(manifests), loaded=len(projects))
        return projects

    async def load_project(self, manifest_path: Path) -> ProjectDefinition | None:
        """Load one manifest. Returns None when the project must be dropped."""
        result = await read_text(manifest_path)
        if result.text is None:
            log.warning("manifest_unreadable", path=str(manifest_path), error=str(result.error))
            return None

        try:
            raw = json.loads(result.text)
            payload = ManifestPayload.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            err = ManifestError.invalid(str(manifest_path), str(e))
            log.warning("manifest_rejected", **err.to_dict())
            return None

        kind = ProjectKind.APPLICATION
        if payload.type == ProjectKind.LIBRARY.value:
            kind = ProjectKind.LIBRARY
        tooling_version = resolve_version(payload.elm_version)
        cache_root = package_cache_root(self._os_name, self._env, tooling_version)

        outcomes = await asyncio.gather(
            *(
                self._load_dependency(Path(cache_root), name, version)
                for name, version in payload.direct_dependencies.items()
            )
        )

        dependencies: list[Dependency] = []
        for outcome in outcomes:
            if isinstance(outcome, Dependency):
                dependencies.append(outcome)
                continue
            if self._packages.strict_documentation:
                log.warning("manifest_rejected", manifest=str(manifest_path), **outcome.to_dict())
                return None
            log.warning("dependency_dropped", manifest=str(manifest_path), **outcome.to_dict())

        return ProjectDefinition(
            path=manifest_path,
            kind=kind,
            version=tooling_version,
            source_dirs=self._source_dirs(manifest_path, payload, kind),
            dependencies=tuple(dependencies),
            payload=raw,
            exposed_modules=tuple(payload.exposed_modules),
        )

    def _source_dirs(
        self, manifest_path: Path, payload: ManifestPayload, kind: ProjectKind
    ) -> tuple[Path, ...]:
        base = manifest_path.parent
        declared = payload.source_directories
        if declared is None:
            declared = [DEFAULT_PACKAGE_SOURCE_DIR] if kind is ProjectKind.LIBRARY else []
        return tuple(Path(os.path.normpath(base / d)) for d in declared)

    async def _load_dependency(
        self, cache_root: Path, name: str, version_spec: str
    ) -> Dependency | ManifestError:
        version = resolve_version(version_spec)
        package_path = cache_root / name / version
        docs_path = package_path / self._packages.documentation_file

        result = await read_text(docs_path)
        if result.text is None:
            return ManifestError.dependency_docs(name, str(docs_path), str(result.error))

        try:
            documentation = PACKAGE_DOCS.validate_json(result.text)
        except ValidationError as e:
            return ManifestError.dependency_docs(name, str(docs_path), str(e))

        return Dependency(
            name=name,
            version=version,
            package_path=package_path,
            exposed_modules=tuple(doc.name for doc in documentation),
            documentation=tuple(documentation),
        )
