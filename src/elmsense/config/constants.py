"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are Elm toolchain conventions and implementation details.

For configurable values, see models.py (WorkspaceConfig, PackagesConfig, etc.).
"""

# =============================================================================
# Manifests
# =============================================================================

CURRENT_MANIFEST = "elm.json"
"""Manifest file name used by Elm 0.19 and newer."""

LEGACY_MANIFEST = "elm-package.json"
"""Manifest file name used by Elm 0.18 and older."""

DEFAULT_PACKAGE_SOURCE_DIR = "src"
"""Source directory of package projects and of every installed dependency."""

# =============================================================================
# Package cache
# =============================================================================

ELM_HOME_ENV = "ELM_HOME"
"""Environment variable the Elm compiler honours for its package cache root."""

WINDOWS_APPDATA_ENV = "APPDATA"
"""Windows per-user application data directory."""

PACKAGES_SUBDIR_SINCE = (0, 19, 1)
"""First compiler version whose cache uses ``packages/`` instead of ``package/``."""

DEFAULT_DOCUMENTATION_FILE = "documentation.json"
"""Per-package documentation blob shipped in the package cache."""

# =============================================================================
# Modules
# =============================================================================

MODULE_SEPARATOR = "."
"""Separator between the segments of a dotted module name."""

DEFAULT_MODULE_EXTENSION = ".elm"
"""Extension of module source files."""
