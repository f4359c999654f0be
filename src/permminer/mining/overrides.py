"""Curated class-level overrides that supersede or extend mined evidence.

Three tables live in one YAML document:

- ``class_overrides``: permissions a class states once for many members
- ``manual_overrides``: permissions found by inspecting apps
- ``parametric``: members whose permission depends on an argument
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from functools import lru_cache
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, Field, ValidationError

from permminer.codemodel.models import ClassElement, CodeElement, CodeModel
from permminer.config.loader import load_yaml
from permminer.core.errors import ConfigError
from permminer.core.logging import get_logger
from permminer.mining.builder import process_inner_classes
from permminer.mining.collector import DEFAULT_HIDDEN_MARKERS, is_hidden

log = get_logger(__name__)

CONSTRUCTOR_NAME = "<init>"
DEFAULT_URI_TYPE = "android.net.Uri"

T = TypeVar("T")


class CustomOverride(BaseModel):
    """One class override entry.

    ``permissions = None`` turns off override synthesis for the class. The
    class's mined definitions are left as they are.
    """

    class_name: str
    permissions: list[str] | None = None
    members: list[str] | None = None
    include_uri_fields: bool = False
    include_all_methods: bool = False
    include_inner_classes_for_uri: bool = False


class ParametricSpec(BaseModel):
    """Members whose required permission depends on a runtime argument."""

    class_name: str
    members: list[str]


class OverrideTables(BaseModel):
    """On-disk shape of overrides.yaml."""

    class_overrides: list[CustomOverride] = Field(default_factory=list)
    manual_overrides: list[CustomOverride] = Field(default_factory=list)
    parametric: list[ParametricSpec] = Field(default_factory=list)


@lru_cache(maxsize=8)
def load_overrides(path: Path) -> OverrideTables:
    """Load and validate an override document once per path."""
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        tables = OverrideTables.model_validate(load_yaml(path))
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    log.debug(
        "overrides_loaded",
        path=str(path),
        class_overrides=len(tables.class_overrides),
        manual_overrides=len(tables.manual_overrides),
        parametric=len(tables.parametric),
    )
    return tables


def covered_class_names(overrides: Iterable[CustomOverride]) -> frozenset[str]:
    """Classes whose class-level definition is announced by an override."""
    return frozenset(process_inner_classes(o.class_name) for o in overrides)


class OverrideResolver:
    """Resolves override entries against the code model.

    A class or member the model does not know is logged and skipped; the
    remaining entries are still processed.
    """

    def __init__(
        self,
        model: CodeModel,
        hidden_markers: Iterable[str] = DEFAULT_HIDDEN_MARKERS,
        uri_type: str = DEFAULT_URI_TYPE,
    ) -> None:
        self._model = model
        self._hidden_markers = tuple(hidden_markers)
        self._uri_type = uri_type

    def resolve(
        self,
        overrides: Sequence[CustomOverride],
        build: Callable[[CodeElement, Sequence[str]], T],
    ) -> list[T]:
        """Apply ``build`` to every element selected by ``overrides``, in order."""
        result: list[T] = []
        for override in overrides:
            if override.permissions is None:
                log.debug("override_class_suppressed", class_name=override.class_name)
                continue
            cls = self._model.find_class(override.class_name)
            if cls is None:
                log.error("override_class_not_found", class_name=override.class_name)
                continue
            permissions = override.permissions
            result.extend(build(element, permissions) for element in self.select(cls, override))
        return result

    def resolve_parametric(
        self,
        specs: Sequence[ParametricSpec],
        build: Callable[[CodeElement, Sequence[str]], T],
    ) -> list[T]:
        overrides = [CustomOverride(class_name=s.class_name, permissions=[], members=s.members) for s in specs]
        return self.resolve(overrides, build)

    def select(self, cls: ClassElement, override: CustomOverride) -> Iterator[CodeElement]:
        """Non-hidden elements of ``cls`` picked by the override's rules."""
        if override.members is not None:
            for name in override.members:
                yield from self._visible(self._members_named(cls, name))
        if override.include_all_methods:
            yield from self._visible(self._model.methods(cls))
        if override.include_uri_fields:
            classes = [cls]
            if override.include_inner_classes_for_uri:
                classes.extend(self._model.nested_classes(cls, recursive=True))
            for current in classes:
                fields = [f for f in self._model.fields(current) if f.type_name == self._uri_type]
                yield from self._visible(fields)

    def _members_named(self, cls: ClassElement, name: str) -> list[CodeElement]:
        members: list[CodeElement]
        if name == CONSTRUCTOR_NAME:
            members = list(self._model.constructors(cls))
        else:
            members = list(self._model.find_methods_by_name(cls, name))
        if members:
            return members
        field = self._model.find_field(cls, name)
        if field is not None:
            return [field]
        log.error("override_member_not_found", class_name=cls.qualified_name, member=name)
        return []

    def _visible(self, elements: Iterable[CodeElement]) -> Iterator[CodeElement]:
        for element in elements:
            if not is_hidden(element, self._hidden_markers):
                yield element
