"""Config module exports."""

from elmsense.config.loader import load_config
from elmsense.config.models import (
    ElmSenseConfig,
    LoggingConfig,
    LogOutputConfig,
    PackagesConfig,
    WorkspaceConfig,
)

__all__ = [
    "load_config",
    "ElmSenseConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "PackagesConfig",
    "WorkspaceConfig",
]
