"""Workspace-wide project list with single-flight memoized loading."""

from __future__ import annotations

import asyncio

from elmsense.core.logging import get_logger
from elmsense.project.manifest import ManifestLoader
from elmsense.project.models import ProjectDefinition

log = get_logger("project.registry")


class ProjectRegistry:
    """Owns the loaded project list for one workspace session.

    The list is loaded on first use and reused for as long as it is non-empty.
    An empty result is not memoized, so a workspace that gains its first
    manifest later is picked up on the next lookup. Concurrent first callers
    share one scan.
    """

    def __init__(self, loader: ManifestLoader) -> None:
        self._loader = loader
        self._projects: list[ProjectDefinition] = []
        self._lock = asyncio.Lock()

    async def projects(self) -> list[ProjectDefinition]:
        if self._projects:
            return self._projects
        async with self._lock:
            if not self._projects:
                self._projects = await self._loader.load_projects()
        return self._projects

    async def project_for(self, contextual_path: str) -> ProjectDefinition | None:
        """First project (in discovery order) with a source dir prefixing the path."""
        for project in await self.projects():
            if project.owns(contextual_path):
                return project
        log.debug("no_owning_project", path=contextual_path)
        return None

    def reset(self) -> None:
        """Forget the loaded projects; the next lookup scans again."""
        self._projects = []
