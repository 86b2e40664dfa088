"""Module header and top-level declaration parser.

Extracts only what completion needs: the module name and exposing list,
imports, top-level functions (with annotations), custom types with their
constructors, and type aliases. Expression bodies are never analysed.

Parsing runs in two passes:

1. Comments and string/char literal contents are stripped, so nothing inside
   them can look like a declaration.
2. The remaining text is cut into top-level chunks (a chunk starts on every
   line that begins in column 0) and each chunk is classified.

An unbalanced exposing list, a misplaced module header or an unterminated
literal raises :class:`ModuleParseError`. Chunks that are not a recognised
top-level form (usually a declaration still being typed) are skipped.
"""

from __future__ import annotations

import re

from elmsense.core.errors import ModuleParseError
from elmsense.core.logging import get_logger
from elmsense.modules.models import (
    CustomType,
    Exposing,
    ExposedView,
    FunctionDeclaration,
    ModuleDescriptor,
    ModuleImport,
    ModuleKind,
    TypeAlias,
)

log = get_logger("modules.parser")

_MODULE_NAME = r"[A-Z][A-Za-z0-9_]*(?:\.[A-Z][A-Za-z0-9_]*)*"

_HEADER_RE = re.compile(rf"^(?:(port|effect)\s+)?module\s+({_MODULE_NAME})(?=\s|$)(.*)$")
_IMPORT_RE = re.compile(
    rf"^import\s+({_MODULE_NAME})(?:\s+as\s+([A-Z][A-Za-z0-9_]*))?(?:\s+exposing\b(.*))?$"
)
_TYPE_ALIAS_RE = re.compile(r"^type\s+alias\s+([A-Z][A-Za-z0-9_]*)\b[^=]*=")
_CUSTOM_TYPE_RE = re.compile(r"^type\s+([A-Z][A-Za-z0-9_]*)\b[^=]*=(.*)$")
_PORT_RE = re.compile(r"^port\s+([a-z][A-Za-z0-9_]*)\s*:(.*)$")
_ANNOTATION_RE = re.compile(r"^([a-z_][A-Za-z0-9_]*)\s*:(?!:)(.*)$")
_DEFINITION_RE = re.compile(r"^([a-z_][A-Za-z0-9_]*)(?:\s[^=]*)?=(?!=)")
_OPERATOR_RE = re.compile(r"^\([^)\s]+\)[^=:]*[:=]")
_INFIX_RE = re.compile(r"^infix[lr]?\s")
_CONSTRUCTOR_RE = re.compile(r"^([A-Z][A-Za-z0-9_]*)\b")
_VALUE_ITEM_RE = re.compile(r"^[a-z_][A-Za-z0-9_]*$")
_TYPE_ITEM_RE = re.compile(r"^([A-Z][A-Za-z0-9_]*)\s*(\(\s*\.\.\s*\))?$")
_OPERATOR_ITEM_RE = re.compile(r"^\(\s*([^()\s]+)\s*\)$")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}


# =============================================================================
# Pass 1: comments and literals
# =============================================================================


def _skip_literal(text: str, start: int, quote: str) -> int:
    """Index just past the literal opening at ``start``."""
    i = start + len(quote)
    n = len(text)
    while i < n:
        if text[i] == "\\":
            i += 2
            continue
        if text.startswith(quote, i):
            return i + len(quote)
        if text[i] == "\n" and quote != '"""':
            break
        i += 1
    line = text.count("\n", 0, start) + 1
    raise ModuleParseError.malformed("unterminated literal", line)


def _skip_block_comment(text: str, start: int, out: list[str]) -> int:
    depth = 0
    i = start
    n = len(text)
    while i < n:
        if text.startswith("{-", i):
            depth += 1
            i += 2
        elif text.startswith("-}", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            # Keep line structure so chunking is unaffected.
            if text[i] == "\n":
                out.append("\n")
            i += 1
    line = text.count("\n", 0, start) + 1
    raise ModuleParseError.malformed("unterminated block comment", line)


def strip_comments_and_literals(text: str) -> str:
    """Remove comments and blank out string/char literal contents."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith("{-", i):
            i = _skip_block_comment(text, i, out)
        elif text.startswith("--", i):
            end = text.find("\n", i)
            i = n if end < 0 else end
        elif text.startswith('"""', i):
            i = _skip_literal(text, i, '"""')
            out.append('""')
        elif text[i] == '"':
            i = _skip_literal(text, i, '"')
            out.append('""')
        elif text[i] == "'":
            i = _skip_literal(text, i, "'")
            out.append("''")
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


# =============================================================================
# Pass 2: top-level chunks
# =============================================================================


def _chunks(cleaned: str) -> list[tuple[int, str]]:
    """Split into (line number, whitespace-normalised text) top-level chunks."""
    chunks: list[tuple[int, list[str]]] = []
    for lineno, line in enumerate(cleaned.splitlines(), start=1):
        if not line.strip():
            continue
        if line[0].isspace():
            if not chunks:
                raise ModuleParseError.malformed("indented text before first declaration", lineno)
            chunks[-1][1].append(line)
        else:
            chunks.append((lineno, [line]))
    return [(lineno, " ".join(" ".join(lines).split())) for lineno, lines in chunks]


def _split_top_level(text: str, sep: str) -> list[str]:
    """Split on ``sep`` outside any bracket nesting."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _balanced(text: str, line: int) -> tuple[str, str]:
    """Split ``( ... ) rest`` into the parenthesised inner text and the rest."""
    text = text.lstrip()
    if not text.startswith("("):
        raise ModuleParseError.malformed("expected '(' after exposing", line)
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[1:i], text[i + 1 :]
    raise ModuleParseError.malformed("unbalanced exposing list", line)


def parse_exposing(inner: str, line: int = 0) -> Exposing:
    """Parse the inside of an exposing list (without the outer parentheses)."""
    if inner.strip() == "..":
        return Exposing.everything()

    values: set[str] = set()
    types: dict[str, bool] = {}
    operators: set[str] = set()
    for raw in _split_top_level(inner, ","):
        item = raw.strip()
        if _VALUE_ITEM_RE.match(item):
            values.add(item)
        elif match := _TYPE_ITEM_RE.match(item):
            types[match.group(1)] = match.group(2) is not None
        elif match := _OPERATOR_ITEM_RE.match(item):
            operators.add(match.group(1))
        else:
            raise ModuleParseError.malformed(f"invalid exposing item {item!r}", line)
    return Exposing(values=frozenset(values), types=types, operators=frozenset(operators))


def _parse_header(match: re.Match[str], line: int) -> tuple[str, ModuleKind, Exposing]:
    kind = ModuleKind(match.group(1)) if match.group(1) else ModuleKind.PLAIN
    rest = match.group(3)
    position = re.search(r"\bexposing\b", rest)
    if position is None:
        raise ModuleParseError.malformed("module header without exposing list", line)
    inner, trailing = _balanced(rest[position.end() :], line)
    if trailing.strip():
        raise ModuleParseError.malformed("unexpected text after module header", line)
    return match.group(2), kind, parse_exposing(inner, line)


def _parse_import(match: re.Match[str], line: int) -> ModuleImport:
    exposing = None
    if match.group(3) is not None:
        inner, trailing = _balanced(match.group(3), line)
        if trailing.strip():
            raise ModuleParseError.malformed("unexpected text after import", line)
        exposing = parse_exposing(inner, line)
    return ModuleImport(module=match.group(1), alias=match.group(2), exposing=exposing)


def _parse_custom_type(match: re.Match[str], line: int) -> CustomType:
    constructors: list[str] = []
    for variant in _split_top_level(match.group(2), "|"):
        ctor = _CONSTRUCTOR_RE.match(variant.strip())
        if ctor is None:
            raise ModuleParseError.malformed(f"invalid variant in type {match.group(1)}", line)
        constructors.append(ctor.group(1))
    return CustomType(name=match.group(1), constructors=tuple(constructors))


def parse_module(text: str) -> ModuleDescriptor:
    """Parse module source text.

    Raises:
        ModuleParseError: The text is not a well-formed module.
    """
    chunks = _chunks(strip_comments_and_literals(text))
    if not chunks:
        raise ModuleParseError.malformed("empty module")

    name, kind, exposing = "Main", ModuleKind.PLAIN, Exposing.everything()
    if header := _HEADER_RE.match(chunks[0][1]):
        name, kind, exposing = _parse_header(header, chunks[0][0])
        chunks = chunks[1:]

    imports: list[ModuleImport] = []
    functions: dict[str, FunctionDeclaration] = {}
    custom_types: list[CustomType] = []
    aliases: list[TypeAlias] = []

    for line, chunk in chunks:
        if _OPERATOR_RE.match(chunk) or _INFIX_RE.match(chunk):
            continue
        if match := _IMPORT_RE.match(chunk):
            imports.append(_parse_import(match, line))
        elif match := _TYPE_ALIAS_RE.match(chunk):
            aliases.append(TypeAlias(name=match.group(1)))
        elif match := _CUSTOM_TYPE_RE.match(chunk):
            custom_types.append(_parse_custom_type(match, line))
        elif match := _PORT_RE.match(chunk):
            functions[match.group(1)] = FunctionDeclaration(
                name=match.group(1), annotation=match.group(2).strip(), is_port=True
            )
        elif match := _ANNOTATION_RE.match(chunk):
            functions[match.group(1)] = FunctionDeclaration(
                name=match.group(1), annotation=match.group(2).strip()
            )
        elif match := _DEFINITION_RE.match(chunk):
            functions.setdefault(match.group(1), FunctionDeclaration(name=match.group(1)))
        elif _HEADER_RE.match(chunk):
            raise ModuleParseError.malformed("module header must come first", line)
        else:
            log.debug("unrecognised_chunk_skipped", line=line, chunk=chunk[:40])

    return ModuleDescriptor(
        name=name,
        text=text,
        exposing=exposing,
        kind=kind,
        imports=tuple(imports),
        function_declarations=tuple(functions.values()),
        custom_types=tuple(custom_types),
        type_aliases=tuple(aliases),
    )


def exposed_surface(module: ModuleDescriptor) -> ExposedView:
    """What importers of ``module`` can see, according to its exposing list."""
    exposing = module.exposing
    custom_types = tuple(
        t if exposing.exposes_constructors(t.name) else CustomType(name=t.name)
        for t in module.custom_types
        if exposing.exposes_type(t.name)
    )
    return ExposedView(
        name=module.name,
        functions=tuple(f for f in module.function_declarations if exposing.exposes_value(f.name)),
        custom_types=custom_types,
        type_aliases=tuple(a for a in module.type_aliases if exposing.exposes_type(a.name)),
    )
