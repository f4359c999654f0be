"""Permission vocabulary: what text counts as a mention of each permission."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from permminer.config.loader import load_yaml
from permminer.core.errors import ConfigError
from permminer.core.logging import get_logger

log = get_logger(__name__)


class VocabularyFile(BaseModel):
    """On-disk shape of vocabulary.yaml."""

    words: dict[str, str]
    regex: dict[str, str] = Field(default_factory=dict)
    class_exclusions: list[str] = Field(default_factory=list)

    @field_validator("words")
    @classmethod
    def validate_words(cls, v: dict[str, str]) -> dict[str, str]:
        for permission, word in v.items():
            if not word:
                raise ValueError(f"empty search word for {permission}")
        return v


@dataclass(frozen=True)
class PermissionVocabulary:
    """Read-only permission -> search term table.

    A permission with a regex entry is searched with that pattern; any
    other permission is searched for its plain word verbatim.
    """

    words: dict[str, str]
    patterns: dict[str, re.Pattern[str]]
    class_exclusions: tuple[str, ...] = ()

    @classmethod
    def from_mappings(
        cls,
        words: dict[str, str],
        regex: dict[str, str] | None = None,
        class_exclusions: list[str] | tuple[str, ...] = (),
    ) -> PermissionVocabulary:
        patterns: dict[str, re.Pattern[str]] = {}
        for permission, pattern in (regex or {}).items():
            if permission not in words:
                raise ConfigError.invalid_pattern(permission, pattern, "regex entry has no word entry")
            try:
                patterns[permission] = re.compile(pattern)
            except re.error as e:
                raise ConfigError.invalid_pattern(permission, pattern, str(e)) from e
        return cls(
            words=dict(words),
            patterns=patterns,
            class_exclusions=tuple(class_exclusions),
        )

    @property
    def permissions(self) -> list[str]:
        return list(self.words)

    def word(self, permission: str) -> str:
        return self.words[permission]

    def pattern(self, permission: str) -> re.Pattern[str] | None:
        return self.patterns.get(permission)

    def is_excluded(self, class_name: str) -> bool:
        """True when ``class_name`` starts with an excluded class or package."""
        return class_name.startswith(self.class_exclusions)


@lru_cache(maxsize=8)
def load_vocabulary(path: Path) -> PermissionVocabulary:
    """Load and validate a vocabulary document once per path.

    Raises:
        ConfigError: File missing, malformed, or holding an invalid regex.
    """
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        raw = VocabularyFile.model_validate(load_yaml(path))
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    vocabulary = PermissionVocabulary.from_mappings(raw.words, raw.regex, raw.class_exclusions)
    log.debug(
        "vocabulary_loaded",
        path=str(path),
        permissions=len(vocabulary.words),
        patterns=len(vocabulary.patterns),
        exclusions=len(vocabulary.class_exclusions),
    )
    return vocabulary
