"""Lexical context at a cursor offset."""

from __future__ import annotations

import re

from elmsense.completion.models import CompletionContext, LexicalContext

# Identifiers and dotted qualifications.
WORD_PATTERN = re.compile(r"[A-Za-z0-9_.]+")

# Anything that can form a token, operator characters included.
TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_+\-/*=.<>:&|^?%!]+")


def match_up_to(text: str, offset: int, pattern: re.Pattern[str]) -> str:
    """Longest run of ``pattern`` characters ending exactly at ``offset``.

    ``pattern`` must be a repeated character class; it is tested one
    character at a time walking back from the cursor.
    """
    end = min(max(offset, 0), len(text))
    start = end
    while start > 0 and pattern.fullmatch(text[start - 1]):
        start -= 1
    return text[start:end]


def token_before(text: str, offset: int) -> str:
    return match_up_to(text, offset, TOKEN_PATTERN)


def classify(text: str, offset: int) -> LexicalContext:
    """Classify the identifier ending at ``offset``.

    A dot-qualified identifier, or one starting with an uppercase letter, is
    a module reference; anything else is a bare value reference.
    """
    match = match_up_to(text, offset, WORD_PATTERN)
    prefix, _, word = match.rpartition(".")

    if prefix or word[:1].isupper():
        return LexicalContext(CompletionContext.MODULE, prefix.strip(), word.strip())
    return LexicalContext(CompletionContext.FUNCTION, "", word.strip())
