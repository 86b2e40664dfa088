"""Workspace session: the object an editor host talks to.

One session owns one project registry and one module cache for its
lifetime. Nothing is shared between sessions and nothing needs tearing down.
Logging is process-wide, so the most recently created session's logging
section is the one in effect.

Usage::

    session = ElmSession(load_config(workspace_root))
    items = await session.provide_completions(path, offset)
    item = await session.resolve_completion_item(items[0])
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from elmsense.completion.engine import CompletionEngine
from elmsense.completion.models import CompletionCandidate
from elmsense.config.models import ElmSenseConfig
from elmsense.core.logging import clear_request_id, configure_logging, set_request_id
from elmsense.docs.index import DocumentationIndex
from elmsense.modules.cache import ModuleCache
from elmsense.modules.parser import parse_module
from elmsense.modules.resolver import ModuleResolver, Parser
from elmsense.project.manifest import ManifestLoader
from elmsense.project.registry import ProjectRegistry


class ElmSession:
    """Completion service for one workspace."""

    def __init__(
        self,
        config: ElmSenseConfig | None = None,
        *,
        parser: Parser = parse_module,
        os_name: str = sys.platform,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config = (config or ElmSenseConfig()).model_copy(deep=True)
        if not self.config.workspace.roots:
            self.config.workspace.roots = [str(Path.cwd())]
        configure_logging(config=self.config.logging)

        loader = ManifestLoader(
            self.config.workspace,
            self.config.packages,
            os_name=os_name,
            env=os.environ if env is None else env,
        )
        self.registry = ProjectRegistry(loader)
        self.cache = ModuleCache()
        self.resolver = ModuleResolver(
            self.registry,
            self.cache,
            extension=self.config.workspace.module_extension,
            parser=parser,
        )
        self.docs = DocumentationIndex(self.registry)
        self.engine = CompletionEngine(self.resolver, self.docs)

    async def provide_completions(
        self, path: str | Path, offset: int, text: str | None = None
    ) -> list[CompletionCandidate]:
        set_request_id()
        try:
            return await self.engine.provide_completions(path, offset, text)
        finally:
            clear_request_id()

    async def resolve_completion_item(self, candidate: CompletionCandidate) -> CompletionCandidate:
        set_request_id()
        try:
            return await self.engine.resolve_completion_item(candidate)
        finally:
            clear_request_id()

    def invalidate(self, path: str | Path) -> None:
        self.resolver.invalidate(path)
