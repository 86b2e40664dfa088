"""ElmSense error types with typed error codes.

Error code ranges:
- 1xxx: Resolution (missing files, unparsable sources, unowned paths)
- 2xxx: Config
- 3xxx: Manifest
- 9xxx: Internal

Only ``ConfigError`` ever escapes the public API. Everything else is raised at
a leaf boundary and converted into an absent value by the caller.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Resolution (1xxx)
    NOT_FOUND = 1001
    PARSE_FAILURE = 1002
    UNRESOLVABLE = 1003
    AMBIGUOUS = 1004

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Manifest (3xxx)
    MANIFEST_INVALID = 3001
    DEPENDENCY_DOCS_UNAVAILABLE = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ElmSenseError(Exception):
    """Base error with structured context for log events."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_FAILURE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ElmSenseError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class SourceNotFound(ElmSenseError):
    """A file could not be read."""

    @classmethod
    def at(cls, path: str, reason: str) -> "SourceNotFound":
        return cls(
            code=ErrorCode.NOT_FOUND,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ModuleParseError(ElmSenseError):
    """Module source text is malformed."""

    @classmethod
    def malformed(cls, reason: str, line: int | None = None) -> "ModuleParseError":
        details: dict[str, Any] = {"reason": reason}
        if line is not None:
            details["line"] = line
        return cls(
            code=ErrorCode.PARSE_FAILURE,
            message=f"Malformed module: {reason}",
            details=details,
        )


class ManifestError(ElmSenseError):
    """A project manifest or one of its dependencies could not be loaded."""

    @classmethod
    def invalid(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_INVALID,
            message=f"Invalid manifest {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def dependency_docs(cls, package: str, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.DEPENDENCY_DOCS_UNAVAILABLE,
            message=f"Documentation for {package} unavailable at {path}: {reason}",
            details={"package": package, "path": path, "reason": reason},
        )


class InternalError(ElmSenseError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
