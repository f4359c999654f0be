"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PERMMINER__SECTION__KEY)
3. Project YAML (<root>/.permminer/config.yaml)
4. Global YAML (~/.config/permminer/config.yaml)
5. Built-in defaults (this file)

Examples:
    PERMMINER__LOGGING__LEVEL=DEBUG
    PERMMINER__MINING__BASELINE_PATH=/data/perm-def-API-23.xml
    PERMMINER__ANALYSIS__TIMEOUT_SEC=600
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        PERMMINER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG prints per-class evidence statistics.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class MiningConfig(BaseModel):
    """Evidence mining and definition synthesis.

    Env vars:
        PERMMINER__MINING__BASELINE_PATH: Existing permission definitions to diff against
        PERMMINER__MINING__OUTPUT_DIR: Where result documents are written
        PERMMINER__MINING__CONTEXT_WIDTH: Evidence context half-width (chars)
    """

    vocabulary_path: str | None = Field(
        default=None,
        description="Permission vocabulary YAML. Default: packaged vocabulary.yaml.",
    )
    overrides_path: str | None = Field(
        default=None,
        description="Curated override tables YAML. Default: packaged overrides.yaml.",
    )
    excluded_defs_path: str | None = Field(
        default=None,
        description="Definitions never reported as new. Default: packaged excluded_defs.xml.",
    )
    baseline_path: str | None = Field(
        default=None,
        description="Baseline definition document. Required for mining.",
    )
    output_dir: str = Field(
        default=".permminer/out",
        description="Output directory for new, manual and parametric definition documents.",
    )
    context_width: int = Field(
        default=150,
        description="Characters of comment text kept on each side of a permission mention.",
    )
    hidden_markers: list[str] = Field(
        default_factory=lambda: ["@hide", "@removed"],
        description="Doc-comment markers that make an element hidden.",
    )
    uri_type: str = Field(
        default="android.net.Uri",
        description="Field type selected by include_uri_fields overrides.",
    )

    @field_validator("context_width")
    @classmethod
    def validate_context_width(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"context_width must be positive, got {v}")
        return v


class AnalysisConfig(BaseModel):
    """External permission analysis (DroidPerm) invocation.

    Env vars:
        PERMMINER__ANALYSIS__HOME: Tool work dir holding the jar and android classpath
        PERMMINER__ANALYSIS__TIMEOUT_SEC: Max wait for the analysis process
    """

    home: str | None = Field(
        default=None,
        description="Analysis work dir. Falls back to the DROID_PERM_HOME env var.",
    )
    jar_name: str = Field(default="droid-perm.jar")
    classpath_name: str = Field(default="android-23-with-util-io.zip")
    extra_args: list[str] = Field(
        default_factory=lambda: [
            "--pathalgo",
            "CONTEXTSENSITIVE",
            "--notaintwrapper",
            "--cgalgo",
            "GEOM",
            "--taint-analysis-enabled",
            "false",
        ],
    )
    apk_suffix: str = Field(
        default="debug.apk",
        description="Suffix of the compiled application artifact searched under the module.",
    )
    timeout_sec: float = Field(
        default=1800.0,
        description="Bounded wait for the analysis process. The process is killed on expiry.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class PermMinerConfig(BaseModel):
    """Root configuration for permminer."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    mining: MiningConfig = Field(default_factory=MiningConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
