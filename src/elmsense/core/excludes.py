"""Directory names that manifest discovery never descends into.

Tier 0 (HARDCODED_DIRS): Never traversed, not user-configurable.
    - VCS internals, ElmSense data directories

Tier 1 (DEFAULT_PRUNABLE_DIRS): Excluded by default, replaced wholesale by
``workspace.excluded_dirs`` when configured.
    - Dependency caches and build outputs that may carry their own manifests
"""

from __future__ import annotations

from collections.abc import Iterable

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # ElmSense data
        ".elmsense",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # npm installs of elm tooling ship their own elm.json files
        "node_modules",
        # compiler artifacts and (0.18) vendored packages
        "elm-stuff",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    return dirname in HARDCODED_DIRS


def prunable_dirs(configured: Iterable[str] | None = None) -> frozenset[str]:
    """Directory names to prune, given the configured exclusions.

    Hardcoded directories are always pruned. ``configured`` replaces the
    default tier when supplied.
    """
    if configured is None:
        return PRUNABLE_DIRS
    return HARDCODED_DIRS | frozenset(configured)
