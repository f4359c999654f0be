"""permminer error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Code model
- 4xxx: Definition documents and guard reports
- 5xxx: External permission analysis
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_INVALID_PATTERN = 2005

    # Code model (3xxx)
    MODEL_PARSE_FAILED = 3001

    # Documents (4xxx)
    DOCUMENT_NOT_FOUND = 4001
    DOCUMENT_PARSE_ERROR = 4002

    # External analysis (5xxx)
    ANALYSIS_FAILED = 5001
    ANALYSIS_TIMEOUT = 5002
    ANALYSIS_INTERRUPTED = 5003
    ANALYSIS_ARTIFACT_NOT_FOUND = 5004
    ANALYSIS_AMBIGUOUS_ARTIFACT = 5005
    ANALYSIS_HOME_NOT_SET = 5006

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class PermMinerError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PermMinerError):
    """Configuration-related errors. Always fatal for the current run."""

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

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def invalid_pattern(cls, permission: str, pattern: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_PATTERN,
            message=f"Invalid search pattern for {permission}: {reason}",
            details={"permission": permission, "pattern": pattern, "reason": reason},
        )


class ModelError(PermMinerError):
    """Code model construction errors."""

    @classmethod
    def parse_failed(cls, path: str, reason: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_PARSE_FAILED,
            message=f"Cannot parse source file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class DocumentError(PermMinerError):
    """Definition document and guard report errors."""

    @classmethod
    def not_found(cls, path: str) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_NOT_FOUND,
            message=f"Document not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_PARSE_ERROR,
            message=f"Failed to parse document at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class AnalysisError(PermMinerError):
    """External permission analysis failures."""

    @classmethod
    def failed(cls, exit_code: int) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_FAILED,
            message=f"Permission analysis terminated with exit code {exit_code}",
            details={"exit_code": exit_code},
        )

    @classmethod
    def timeout(cls, seconds: float) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_TIMEOUT,
            message=f"Permission analysis timed out after {seconds}s",
            retryable=True,
            details={"timeout_sec": seconds},
        )

    @classmethod
    def interrupted(cls) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_INTERRUPTED,
            message="Permission analysis was interrupted",
            retryable=True,
        )

    @classmethod
    def artifact_not_found(cls, directory: str, suffix: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_ARTIFACT_NOT_FOUND,
            message=f"No *{suffix} files under {directory}",
            details={"directory": directory, "suffix": suffix},
        )

    @classmethod
    def ambiguous_artifact(cls, candidates: list[str]) -> "AnalysisError":
        joined = ",\n\t".join(candidates)
        return cls(
            code=ErrorCode.ANALYSIS_AMBIGUOUS_ARTIFACT,
            message=f"Multiple application artifacts found:\n\t{joined}",
            details={"candidates": candidates},
        )

    @classmethod
    def home_not_set(cls) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_HOME_NOT_SET,
            message="Analysis home directory is not set "
            "(PERMMINER__ANALYSIS__HOME or DROID_PERM_HOME)",
        )


class InternalError(PermMinerError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
