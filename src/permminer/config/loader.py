"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Direct kwargs
2. Environment variables (PERMMINER__SECTION__KEY)
3. Project config (<root>/.permminer/config.yaml)
4. Global config (~/.config/permminer/config.yaml)
5. Built-in defaults
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from permminer.config.models import (
    AnalysisConfig,
    LoggingConfig,
    MiningConfig,
    PermMinerConfig,
)
from permminer.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/permminer/config.yaml").expanduser()
PROJECT_CONFIG_NAME = Path(".permminer") / "config.yaml"


def load_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping; a missing file yields an empty mapping."""
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level YAML value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class bound to one pre-loaded YAML mapping."""

    class PermMinerSettings(BaseSettings):
        """Root config. Env vars: PERMMINER__LOGGING__LEVEL, PERMMINER__MINING__BASELINE_PATH, etc."""

        model_config = SettingsConfigDict(
            env_prefix="PERMMINER__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        mining: MiningConfig = MiningConfig()
        analysis: AnalysisConfig = AnalysisConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return PermMinerSettings


def load_config(project_root: Path | None = None, **kwargs: Any) -> PermMinerConfig:
    """Load config: defaults < global yaml < project yaml < env vars < kwargs.

    Args:
        project_root: Directory holding .permminer/config.yaml.
                      Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    project_root = project_root or Path.cwd()

    yaml_config = _deep_merge(
        load_yaml(GLOBAL_CONFIG_PATH),
        load_yaml(project_root / PROJECT_CONFIG_NAME),
    )

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return PermMinerConfig.model_validate(settings.model_dump())
