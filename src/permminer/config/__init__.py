"""Config module exports."""

from permminer.config.loader import load_config
from permminer.config.models import (
    AnalysisConfig,
    LoggingConfig,
    MiningConfig,
    PermMinerConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "LoggingConfig",
    "MiningConfig",
    "PermMinerConfig",
]
