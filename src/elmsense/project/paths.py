"""Package cache location and version-constraint helpers.

Everything here is pure: the host OS, environment and home directory are
parameters so the rules can be exercised on any platform.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path, PurePath, PureWindowsPath

from elmsense.config.constants import (
    ELM_HOME_ENV,
    PACKAGES_SUBDIR_SINCE,
    WINDOWS_APPDATA_ENV,
)

# "1.0.0 <= v < 2.0.0" and friends
_CONSTRAINT_RE = re.compile(r"^\s*(\d+\.\d+\.\d+)\s*<=?\s*v\s*<=?\s*\d+\.\d+\.\d+\s*$")
_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)\.(\d+)\s*$")


def resolve_version(spec: str) -> str:
    """Exact version for a manifest version string.

    Exact versions are returned unchanged; constraints resolve to their lower
    bound. Anything else is returned stripped.

    Examples:
        >>> resolve_version("1.0.5")
        '1.0.5'
        >>> resolve_version("1.0.0 <= v < 2.0.0")
        '1.0.0'
    """
    if match := _CONSTRAINT_RE.match(spec):
        return match.group(1)
    return spec.strip()


def _version_tuple(version: str) -> tuple[int, int, int] | None:
    match = _VERSION_RE.match(version)
    if not match:
        return None
    major, minor, patch = (int(g) for g in match.groups())
    return major, minor, patch


def packages_subdir(tooling_version: str) -> str:
    """Cache sub-directory name: ``package`` up to 0.19.0, ``packages`` after."""
    parsed = _version_tuple(tooling_version)
    if parsed is not None and parsed < PACKAGES_SUBDIR_SINCE:
        return "package"
    return "packages"


def package_cache_root(
    os_name: str,
    env: Mapping[str, str],
    tooling_version: str,
    home: PurePath | None = None,
) -> PurePath:
    """Directory holding installed packages for ``tooling_version``.

    Args:
        os_name: ``sys.platform`` style name; ``win32`` selects Windows rules.
        env: Environment variables. ``ELM_HOME`` overrides the root on every
            platform; ``APPDATA`` roots it on Windows.
        tooling_version: Declared compiler version (exact or constraint).
        home: Home directory for non-Windows hosts. Defaults to ``HOME`` from
            ``env`` and then to the current user's home.
    """
    version = resolve_version(tooling_version)
    windows = os_name == "win32"
    path_cls: type[PurePath] = PureWindowsPath if windows else Path

    if env.get(ELM_HOME_ENV):
        root = path_cls(env[ELM_HOME_ENV])
    elif windows:
        root = PureWindowsPath(env.get(WINDOWS_APPDATA_ENV, "")) / "elm"
    else:
        base = home if home is not None else Path(env.get("HOME") or Path.home())
        root = Path(base) / ".elm"

    return root / version / packages_subdir(version)
