"""Parsed-module cache keyed by file path."""

from __future__ import annotations

from collections.abc import Iterator

from elmsense.modules.models import ModuleCacheEntry, ModuleDescriptor


class ModuleCache:
    """Successfully parsed modules, keyed by the path they were read from.

    Entries never expire; they are replaced only after an explicit
    :meth:`invalidate`. Failed parses are never stored.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ModuleCacheEntry] = {}

    def get(self, path: str) -> ModuleCacheEntry | None:
        return self._entries.get(path)

    def put(self, path: str, module: ModuleDescriptor) -> ModuleCacheEntry:
        entry = ModuleCacheEntry(path=path, module_name=module.name, parsed=module)
        self._entries[path] = entry
        return entry

    def invalidate(self, path: str) -> bool:
        """Drop the entry for ``path``. Returns whether one existed."""
        return self._entries.pop(path, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
