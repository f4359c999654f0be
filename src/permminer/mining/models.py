"""Permission definition records and the immutable sets that hold them."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class TargetKind(Enum):
    CLASS = "Class"
    FIELD = "Field"
    METHOD = "Method"


class PermissionRel(Enum):
    ALL_OF = "AllOf"
    ANY_OF = "AnyOf"


@dataclass(frozen=True, slots=True)
class PermissionDefinition:
    """Binds a class, field or method to the permissions it requires.

    Equality and hashing cover class name, target, kind and permissions.
    The evidence comment, relation and conditional flag ride along but two
    definitions differing only in them are duplicates.
    """

    class_name: str
    target: str | None
    target_kind: TargetKind
    permissions: tuple[str, ...]
    comment: str | None = field(default=None, compare=False)
    relation: PermissionRel = field(default=PermissionRel.ALL_OF, compare=False)
    conditional: bool = field(default=True, compare=False)

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return (self.class_name, self.target_kind.value, self.target or "")


@dataclass(frozen=True, slots=True)
class ParametricSensDef:
    """A member whose permission depends on a runtime argument, e.g. a content URI."""

    class_name: str
    target: str | None

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.class_name, self.target or "")


class DefinitionSet:
    """Insertion-ordered, deduplicated collection of PermissionDefinition.

    Never mutated: every operation returns a new set. The first of several
    structurally equal definitions is the one kept.
    """

    __slots__ = ("_items",)

    def __init__(self, definitions: Iterable[PermissionDefinition] = ()) -> None:
        items: dict[PermissionDefinition, None] = {}
        for definition in definitions:
            items.setdefault(definition, None)
        self._items = items

    def __iter__(self) -> Iterator[PermissionDefinition]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DefinitionSet):
            return NotImplemented
        return self._items.keys() == other._items.keys()

    def __hash__(self) -> int:
        return hash(frozenset(self._items))

    def __repr__(self) -> str:
        return f"DefinitionSet({len(self)} definitions)"

    def union(self, other: Iterable[PermissionDefinition]) -> DefinitionSet:
        return DefinitionSet([*self, *other])

    def difference(self, other: Iterable[PermissionDefinition]) -> DefinitionSet:
        removed = other if isinstance(other, DefinitionSet) else DefinitionSet(other)
        return DefinitionSet(d for d in self if d not in removed)

    def filter(self, predicate: Callable[[PermissionDefinition], bool]) -> DefinitionSet:
        return DefinitionSet(d for d in self if predicate(d))

    def sorted(self) -> DefinitionSet:
        """Ordered by class name, target kind, then target."""
        return DefinitionSet(sorted(self, key=lambda d: d.sort_key))
