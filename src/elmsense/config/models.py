"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (ELMSENSE__SECTION__KEY)
3. Workspace YAML (<workspace>/.elmsense/config.yaml)
4. Global YAML (~/.config/elmsense/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    ELMSENSE__<SECTION>__<KEY>=<VALUE>

Examples:
    ELMSENSE__LOGGING__LEVEL=DEBUG
    ELMSENSE__PACKAGES__ELM_HOME=/opt/elm-home
    ELMSENSE__PACKAGES__STRICT_DOCUMENTATION=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from elmsense.config.constants import (
    CURRENT_MANIFEST,
    DEFAULT_DOCUMENTATION_FILE,
    DEFAULT_MODULE_EXTENSION,
    LEGACY_MANIFEST,
)
from elmsense.core.excludes import DEFAULT_PRUNABLE_DIRS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        ELMSENSE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every swallowed read and parse failure.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class WorkspaceConfig(BaseModel):
    """Workspace scanning configuration.

    Env vars:
        ELMSENSE__WORKSPACE__ROOTS: JSON list of workspace directories
    """

    roots: list[str] = Field(
        default_factory=list,
        description="Directories scanned for manifests. Empty means the directory "
        "the configuration was loaded for.",
    )
    manifest_names: list[str] = Field(
        default_factory=lambda: [CURRENT_MANIFEST, LEGACY_MANIFEST],
        description="Manifest file names, current convention first.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_PRUNABLE_DIRS),
        description="Directory names never descended into while scanning.",
    )
    module_extension: str = Field(
        default=DEFAULT_MODULE_EXTENSION,
        description="Extension appended to module paths during name resolution.",
    )

    @field_validator("roots")
    @classmethod
    def validate_roots(cls, v: list[str]) -> list[str]:
        return [str(Path(root).expanduser().resolve()) for root in v]

    @field_validator("module_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError(f"Module extension must start with '.': {v}")
        return v


class PackagesConfig(BaseModel):
    """Dependency package cache configuration.

    Env vars:
        ELMSENSE__PACKAGES__ELM_HOME: Override the package cache root
        ELMSENSE__PACKAGES__STRICT_DOCUMENTATION: Reject a whole project when
            any dependency's documentation cannot be loaded
    """

    elm_home: str | None = Field(
        default=None,
        description="Package cache root. Takes precedence over the ELM_HOME env var.",
    )
    documentation_file: str = Field(
        default=DEFAULT_DOCUMENTATION_FILE,
        description="Documentation blob name inside each package directory.",
    )
    strict_documentation: bool = Field(
        default=False,
        description="When true a dependency without readable documentation drops "
        "its whole project. When false only that dependency is dropped.",
    )


class ElmSenseConfig(BaseModel):
    """Root configuration for ElmSense.

    All settings can be configured via:
    1. Environment variables: ELMSENSE__SECTION__KEY
    2. YAML config files (workspace or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)
