"""Module resolution: dotted names to files, files to parsed modules.

Name resolution searches the owning project's source directories in
declaration order, then each dependency's ``src/`` in dependency order. The
first readable and parsable candidate wins, so local modules shadow
dependency modules of the same name.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from elmsense.config.constants import DEFAULT_MODULE_EXTENSION, MODULE_SEPARATOR
from elmsense.core.errors import ModuleParseError
from elmsense.core.logging import get_logger
from elmsense.modules.cache import ModuleCache
from elmsense.modules.models import ModuleDescriptor
from elmsense.modules.parser import parse_module
from elmsense.project.fs import read_text
from elmsense.project.models import ProjectDefinition
from elmsense.project.registry import ProjectRegistry

log = get_logger("modules.resolver")

Parser = Callable[[str], ModuleDescriptor]


class ModuleResolver:
    """Resolves and caches modules for one workspace session."""

    def __init__(
        self,
        registry: ProjectRegistry,
        cache: ModuleCache,
        *,
        extension: str = DEFAULT_MODULE_EXTENSION,
        parser: Parser = parse_module,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.parser = parser
        self._extension = extension

    async def project_for(self, contextual_path: str | Path) -> ProjectDefinition | None:
        return await self.registry.project_for(str(contextual_path))

    def invalidate(self, path: str | Path) -> None:
        """Drop any cached module for ``path``. Safe when nothing is cached."""
        if self.cache.invalidate(str(path)):
            log.debug("module_invalidated", path=str(path))

    def _parse_and_store(self, path: str, text: str) -> ModuleDescriptor | None:
        try:
            module = self.parser(text)
        except ModuleParseError as e:
            log.debug("module_parse_failed", path=path, **e.details)
            return None
        self.cache.put(path, module)
        return module

    async def module_from_path(self, path: str | Path) -> ModuleDescriptor | None:
        """Parsed module at ``path``; None when unreadable or unparsable."""
        key = str(path)
        if (entry := self.cache.get(key)) is not None:
            return entry.parsed

        result = await read_text(key)
        if result.text is None:
            return None
        return self._parse_and_store(key, result.text)

    def module_from_text(self, path: str | Path, text: str) -> ModuleDescriptor | None:
        """Parse host-supplied text for ``path``, replacing any cached entry."""
        self.invalidate(path)
        return self._parse_and_store(str(path), text)

    def candidate_paths(self, project: ProjectDefinition, module_name: str) -> list[str]:
        """Every file that could hold ``module_name``, in shadowing order."""
        relative = module_name.replace(MODULE_SEPARATOR, os.sep) + self._extension
        local = [os.path.join(d, relative) for d in project.source_dirs]
        packaged = [os.path.join(dep.source_dir, relative) for dep in project.dependencies]
        return local + packaged

    async def module_from_name(
        self, contextual_path: str | Path, module_name: str
    ) -> ModuleDescriptor | None:
        """Resolve ``module_name`` as seen from the project owning ``contextual_path``."""
        project = await self.project_for(contextual_path)
        if project is None:
            return None

        for candidate in self.candidate_paths(project, module_name):
            module = await self.module_from_path(candidate)
            if module is not None:
                return module

        log.debug("module_unresolved", module=module_name, project=str(project.path))
        return None
