"""Context-aware completion."""

from elmsense.completion.context import classify, match_up_to, token_before
from elmsense.completion.engine import CompletionEngine, import_matches, remaining_segments
from elmsense.completion.models import (
    CompletionCandidate,
    CompletionContext,
    CompletionKind,
    LexicalContext,
)

__all__ = [
    "CompletionEngine",
    "CompletionCandidate",
    "CompletionContext",
    "CompletionKind",
    "LexicalContext",
    "classify",
    "import_matches",
    "match_up_to",
    "remaining_segments",
    "token_before",
]
