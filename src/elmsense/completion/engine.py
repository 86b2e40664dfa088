"""Completion candidates for a cursor position.

Flow for one request:

1. Re-parse the active document (its cached entry is always stale).
2. Bail out when no token precedes the cursor.
3. Classify the cursor context and keep the imports whose module name or
   alias starts with the typed text.
4. Resolve those imports concurrently and read their exposed surface.
5. Assemble candidates for the context, in declaration order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from itertools import zip_longest
from pathlib import Path

from elmsense.completion.context import classify, token_before
from elmsense.completion.models import (
    CompletionCandidate,
    CompletionContext,
    CompletionKind,
)
from elmsense.config.constants import MODULE_SEPARATOR
from elmsense.core.logging import get_logger
from elmsense.docs.index import DocumentationIndex
from elmsense.modules.models import ExposedView, ModuleDescriptor, ModuleImport
from elmsense.modules.parser import exposed_surface
from elmsense.modules.resolver import ModuleResolver

log = get_logger("completion.engine")


@dataclass(frozen=True, slots=True)
class ResolvedImport:
    import_: ModuleImport
    module: ModuleDescriptor
    view: ExposedView


def import_matches(item: ModuleImport, text: str) -> bool:
    return item.module.startswith(text) or (item.alias or "").startswith(text)


def remaining_segments(module_name: str, prefix: str) -> list[str]:
    """Trailing segments of ``module_name`` not already typed in ``prefix``.

    Segments are paired left to right and collected from the right until the
    first pair that already agrees.

    Examples:
        >>> remaining_segments("Html", "")
        ['Html']
        >>> remaining_segments("Html.Attributes", "Html")
        ['Attributes']
        >>> remaining_segments("Html", "Html")
        []
    """
    pairs = list(
        zip_longest(module_name.split(MODULE_SEPARATOR), prefix.split(MODULE_SEPARATOR))
    )
    taken: list[str | None] = []
    for segment, typed in reversed(pairs):
        if segment == typed:
            break
        taken.append(segment)
    return [s for s in reversed(taken) if s is not None]


class CompletionEngine:
    """Produces and resolves completion candidates."""

    def __init__(self, resolver: ModuleResolver, docs: DocumentationIndex) -> None:
        self._resolver = resolver
        self._docs = docs

    async def provide_completions(
        self, document_path: str | Path, offset: int, text: str | None = None
    ) -> list[CompletionCandidate]:
        """Candidates for the cursor at ``offset`` in ``document_path``.

        ``text`` is the host's current buffer; without it the document is
        re-read from disk.
        """
        path = str(document_path)
        if text is None:
            self._resolver.invalidate(path)
            module = await self._resolver.module_from_path(path)
        else:
            module = self._resolver.module_from_text(path, text)

        if module is None:
            log.debug("document_unavailable", path=path)
            return []

        if not token_before(module.text, offset):
            return []

        lexical = classify(module.text, offset)
        matching = [i for i in module.imports if import_matches(i, lexical.match_text)]
        resolved = await self._resolve_imports(path, matching)

        if lexical.context is CompletionContext.FUNCTION:
            candidates = self._function_candidates(path, module, resolved)
        elif lexical.context is CompletionContext.MODULE:
            candidates = self._module_candidates(path, lexical.prefix, resolved)
        else:
            candidates = []

        log.debug(
            "completions_provided",
            path=path,
            context=lexical.context.value,
            prefix=lexical.prefix,
            word=lexical.word,
            count=len(candidates),
        )
        return candidates

    async def resolve_completion_item(self, candidate: CompletionCandidate) -> CompletionCandidate:
        """Fill ``detail`` and ``documentation`` in place; empty when undocumented."""
        entry = await self._docs.docs(candidate.contextual_path, candidate.module, candidate.name)
        if entry is None:
            candidate.detail = ""
            candidate.documentation = ""
        else:
            candidate.detail = f"{entry.name} : {entry.type}"
            candidate.documentation = entry.comment
        return candidate

    async def _resolve_imports(
        self, path: str, imports: list[ModuleImport]
    ) -> list[ResolvedImport]:
        modules = await asyncio.gather(
            *(self._resolver.module_from_name(path, i.module) for i in imports)
        )
        return [
            ResolvedImport(import_=item, module=module, view=exposed_surface(module))
            for item, module in zip(imports, modules, strict=True)
            if module is not None
        ]

    def _function_candidates(
        self, path: str, module: ModuleDescriptor, resolved: list[ResolvedImport]
    ) -> list[CompletionCandidate]:
        local = [
            CompletionCandidate(d.name, CompletionKind.VALUE, path, module.name, d.name)
            for d in module.function_declarations
        ]
        imported = [
            CompletionCandidate(f.name, CompletionKind.VALUE, path, r.module.name, f.name)
            for r in resolved
            for f in r.view.functions
        ]
        constructors = [
            CompletionCandidate(c, CompletionKind.MODULE, path, r.module.name, c)
            for r in resolved
            for t in r.view.custom_types
            for c in t.constructors
        ]
        return local + imported + constructors

    def _module_candidates(
        self, path: str, prefix: str, resolved: list[ResolvedImport]
    ) -> list[CompletionCandidate]:
        candidates: list[CompletionCandidate] = []
        for r in resolved:
            remaining = remaining_segments(r.view.name, prefix)
            if remaining:
                candidates.append(
                    CompletionCandidate(
                        MODULE_SEPARATOR.join(remaining),
                        CompletionKind.MODULE,
                        path,
                        r.module.name,
                        r.view.name,
                    )
                )
            if r.module.name == prefix or r.import_.alias == prefix:
                candidates.extend(
                    CompletionCandidate(f.name, CompletionKind.VALUE, path, r.module.name, f.name)
                    for f in r.view.functions
                )
        return candidates
