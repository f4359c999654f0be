"""Packaged declarative tables used when the config names no override."""

from pathlib import Path

VOCABULARY_FILE = "vocabulary.yaml"
OVERRIDES_FILE = "overrides.yaml"
EXCLUDED_DEFS_FILE = "excluded_defs.xml"


def data_path(name: str) -> Path:
    """Path of a packaged data file."""
    return Path(__file__).parent / name


def resolve_data_path(configured: str | None, default_name: str) -> Path:
    """Configured path when set, else the packaged default."""
    if configured:
        return Path(configured).expanduser()
    return data_path(default_name)


__all__ = [
    "EXCLUDED_DEFS_FILE",
    "OVERRIDES_FILE",
    "VOCABULARY_FILE",
    "data_path",
    "resolve_data_path",
]
