"""Core module exports."""

from elmsense.core.errors import (
    ConfigError,
    ElmSenseError,
    ErrorCode,
    InternalError,
    ManifestError,
    ModuleParseError,
    SourceNotFound,
)
from elmsense.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ElmSenseError",
    "ErrorCode",
    "ConfigError",
    "SourceNotFound",
    "ModuleParseError",
    "ManifestError",
    "InternalError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
