"""Completion models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CompletionContext(Enum):
    """What the token under the cursor refers to."""

    FUNCTION = "function"
    MODULE = "module"
    IMPORT = "import"  # reserved, never produced by the classifier
    TYPE = "type"  # reserved, never produced by the classifier


class CompletionKind(Enum):
    VALUE = "value"
    TYPE = "type"
    MODULE = "module"


@dataclass(frozen=True, slots=True)
class LexicalContext:
    context: CompletionContext
    prefix: str
    word: str

    @property
    def match_text(self) -> str:
        """Text imports are matched against: the prefix when typed, else the word."""
        return self.prefix or self.word


@dataclass
class CompletionCandidate:
    """A proposed completion.

    ``detail`` and ``documentation`` stay None until the candidate is resolved.
    """

    label: str
    kind: CompletionKind
    contextual_path: str
    module: str
    name: str
    detail: str | None = None
    documentation: str | None = None

    @property
    def identity(self) -> tuple[str, CompletionKind, str, str]:
        return (self.label, self.kind, self.module, self.name)
