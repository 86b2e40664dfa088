"""Filesystem boundary: text reads and manifest discovery.

These are the only suspension points of the package. Blocking calls run in
the loop's default executor.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from elmsense.core.errors import SourceNotFound


@dataclass(frozen=True, slots=True)
class ReadResult:
    """Outcome of reading a file: text, or the reason it is missing."""

    path: str
    text: str | None = None
    error: SourceNotFound | None = None

    @property
    def found(self) -> bool:
        return self.text is not None

    @classmethod
    def ok(cls, path: str, text: str) -> ReadResult:
        return cls(path=path, text=text)

    @classmethod
    def missing(cls, path: str, reason: str) -> ReadResult:
        return cls(path=path, error=SourceNotFound.at(path, reason))


def _read_sync(path: str) -> ReadResult:
    try:
        with open(path, encoding="utf-8") as f:
            return ReadResult.ok(path, f.read())
    except (OSError, UnicodeDecodeError) as e:
        return ReadResult.missing(path, str(e))


async def read_text(path: str | Path) -> ReadResult:
    """Read a UTF-8 file. Never raises; failures become ``ReadResult.missing``."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_sync, str(path))


def _walk_with_pruning(root: Path, names: frozenset[str], pruned: frozenset[str]) -> list[Path]:
    """Walk ``root`` pruning directory names in ``pruned``. Returns matching files."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in pruned)
        for filename in sorted(filenames):
            if filename in names:
                found.append(Path(dirpath) / filename)
    return found


def _find_sync(roots: list[Path], names: frozenset[str], pruned: frozenset[str]) -> list[Path]:
    seen: set[Path] = set()
    manifests: list[Path] = []
    for root in roots:
        for path in _walk_with_pruning(root, names, pruned):
            resolved = path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                manifests.append(resolved)
    return manifests


async def find_manifests(
    roots: Iterable[str | Path],
    names: Iterable[str],
    pruned: Iterable[str],
) -> list[Path]:
    """Find manifest files under every root, in root order then walk order.

    Missing roots yield nothing. A manifest reachable from two roots is
    reported once, at its first position.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        _find_sync,
        [Path(r) for r in roots],
        frozenset(names),
        frozenset(pruned),
    )
