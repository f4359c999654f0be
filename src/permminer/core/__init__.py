"""Core module exports."""

from permminer.core.errors import (
    AnalysisError,
    ConfigError,
    DocumentError,
    ErrorCode,
    InternalError,
    ModelError,
    PermMinerError,
)
from permminer.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from permminer.core.progress import spinner, status, task

__all__ = [
    # Errors
    "AnalysisError",
    "ConfigError",
    "DocumentError",
    "ErrorCode",
    "InternalError",
    "ModelError",
    "PermMinerError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
    "status",
    "task",
]
