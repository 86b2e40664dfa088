"""Declaration documentation from dependencies' bundled docs."""

from __future__ import annotations

from elmsense.core.errors import ErrorCode
from elmsense.core.logging import get_logger
from elmsense.project.models import Dependency, DocEntry, ModuleDocs
from elmsense.project.registry import ProjectRegistry

log = get_logger("docs.index")


def find_declaration(docs: ModuleDocs, name: str) -> DocEntry | None:
    """Look ``name`` up among values, operators, aliases, then unions.

    A union constructor resolves to its union's documentation, typed as the
    applied union (``Maybe a``).
    """
    for value in (*docs.values, *docs.binops):
        if value.name == name:
            return DocEntry(name=value.name, type=value.type, comment=value.comment)
    for alias in docs.aliases:
        if alias.name == name:
            return DocEntry(name=alias.name, type=alias.type, comment=alias.comment)
    for union in docs.unions:
        if union.name == name or any(case == name for case, _ in union.cases):
            applied = " ".join([union.name, *union.args])
            return DocEntry(name=name, type=applied, comment=union.comment)
    return None


def _lookup(dependency: Dependency, module_name: str, name: str) -> DocEntry | None:
    for docs in dependency.documentation:
        if docs.name != module_name:
            continue
        if (entry := find_declaration(docs, name)) is not None:
            return entry
    return None


class DocumentationIndex:
    """Answers documentation queries against the owning project's dependencies.

    When several dependencies expose the same module the first one, in
    manifest order, that documents the declaration wins.
    """

    def __init__(self, registry: ProjectRegistry) -> None:
        self._registry = registry

    async def docs(
        self, contextual_path: str, module_name: str, declaration_name: str
    ) -> DocEntry | None:
        project = await self._registry.project_for(contextual_path)
        if project is None:
            return None

        exposing = [d for d in project.dependencies if d.exposes(module_name)]
        if len(exposing) > 1:
            log.debug(
                "ambiguous_module_docs",
                code=ErrorCode.AMBIGUOUS.name,
                module=module_name,
                packages=[d.name for d in exposing],
            )

        for dependency in exposing:
            if (entry := _lookup(dependency, module_name, declaration_name)) is not None:
                return entry
        return None
