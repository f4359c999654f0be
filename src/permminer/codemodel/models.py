"""Immutable code model: an arena of classes, fields and methods.

Elements reference each other by integer id (their index in the arena),
so the mining and matching algorithms work on plain data independent of
the front-end that produced it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from permminer.codemodel.ranges import LineIndex, TextRange


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"


@dataclass(frozen=True, slots=True)
class DocComment:
    """A documentation comment and its location in the owning file."""

    text: str
    text_range: TextRange


@dataclass(frozen=True)
class SourceFile:
    file_id: int
    path: Path
    text: str
    package: str | None
    comment_ranges: tuple[TextRange, ...] = ()
    top_level_class_ids: tuple[int, ...] = ()
    line_index: LineIndex = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "line_index", LineIndex(self.text))

    def comment_texts(self) -> Iterator[str]:
        for span in self.comment_ranges:
            yield span.substring(self.text)


@dataclass(frozen=True)
class CodeElement:
    """Common shape of every comment-bearing code element."""

    element_id: int
    file_id: int
    name: str
    owner_id: int | None
    visibility: Visibility
    text_range: TextRange
    doc_comment: DocComment | None = None

    @property
    def doc_text(self) -> str:
        return self.doc_comment.text if self.doc_comment is not None else ""

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def full_range(self) -> TextRange:
        """Element range including its documentation comment."""
        if self.doc_comment is None:
            return self.text_range
        return self.text_range.union(self.doc_comment.text_range)


@dataclass(frozen=True)
class ClassElement(CodeElement):
    qualified_name: str = ""
    kind: str = "class"  # class, interface, enum, annotation, record
    field_ids: tuple[int, ...] = ()
    method_ids: tuple[int, ...] = ()
    nested_class_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class FieldElement(CodeElement):
    type_name: str = ""


@dataclass(frozen=True)
class MethodElement(CodeElement):
    return_type: str | None = None
    parameter_types: tuple[str, ...] = ()
    is_constructor: bool = False
    statement_ranges: tuple[TextRange, ...] = ()

    @property
    def sub_signature(self) -> str:
        """``name(T1,T2)`` with constructors named ``<init>``."""
        name = "<init>" if self.is_constructor else self.name
        return f"{name}({','.join(self.parameter_types)})"


class CodeModel:
    """Read-only arena over every element of a source tree."""

    def __init__(self, files: Sequence[SourceFile], elements: Sequence[CodeElement]) -> None:
        self._files = tuple(files)
        self._elements = tuple(elements)
        self._classes_by_name: dict[str, int] = {}
        for index, element in enumerate(self._elements):
            if element.element_id != index:
                raise ValueError(f"Element {element.name!r} has id {element.element_id}, expected {index}")
            if isinstance(element, ClassElement):
                self._classes_by_name.setdefault(element.qualified_name, element.element_id)

    # Arena access

    @property
    def files(self) -> tuple[SourceFile, ...]:
        return self._files

    @property
    def elements(self) -> tuple[CodeElement, ...]:
        return self._elements

    def element(self, element_id: int) -> CodeElement:
        return self._elements[element_id]

    def file_of(self, element: CodeElement) -> SourceFile:
        return self._files[element.file_id]

    def owner(self, element: CodeElement) -> ClassElement | None:
        if element.owner_id is None:
            return None
        owner = self._elements[element.owner_id]
        assert isinstance(owner, ClassElement)
        return owner

    # Classes

    def classes(self) -> Iterator[ClassElement]:
        for element in self._elements:
            if isinstance(element, ClassElement):
                yield element

    def find_class(self, qualified_name: str) -> ClassElement | None:
        element_id = self._classes_by_name.get(qualified_name)
        if element_id is None:
            return None
        found = self._elements[element_id]
        assert isinstance(found, ClassElement)
        return found

    def top_level_classes(self, source: SourceFile) -> list[ClassElement]:
        return [self._class(cid) for cid in source.top_level_class_ids]

    def nested_classes(self, cls: ClassElement, *, recursive: bool = False) -> list[ClassElement]:
        result: list[ClassElement] = []
        for cid in cls.nested_class_ids:
            nested = self._class(cid)
            result.append(nested)
            if recursive:
                result.extend(self.nested_classes(nested, recursive=True))
        return result

    # Members

    def fields(self, cls: ClassElement) -> list[FieldElement]:
        return [f for f in self._resolve(cls.field_ids) if isinstance(f, FieldElement)]

    def methods(self, cls: ClassElement) -> list[MethodElement]:
        """Methods and constructors declared directly in ``cls``."""
        return [m for m in self._resolve(cls.method_ids) if isinstance(m, MethodElement)]

    def constructors(self, cls: ClassElement) -> list[MethodElement]:
        return [m for m in self.methods(cls) if m.is_constructor]

    def find_methods_by_name(self, cls: ClassElement, name: str) -> list[MethodElement]:
        return [m for m in self.methods(cls) if not m.is_constructor and m.name == name]

    def find_field(self, cls: ClassElement, name: str) -> FieldElement | None:
        for f in self.fields(cls):
            if f.name == name:
                return f
        return None

    def members(self, cls: ClassElement) -> list[CodeElement]:
        """Fields, methods and constructors of ``cls`` in source order."""
        found: list[CodeElement] = [*self.fields(cls), *self.methods(cls)]
        return sorted(found, key=lambda e: e.text_range.start)

    def find_method(self, class_name: str, sub_signature: str) -> MethodElement | None:
        cls = self.find_class(class_name)
        if cls is None:
            return None
        wanted = "".join(sub_signature.split())
        for method in self.methods(cls):
            if method.sub_signature == wanted:
                return method
        return None

    # Comments

    def files_with_comment_word(self, word: str) -> list[SourceFile]:
        """Files where some comment (line, block or doc) contains ``word``."""
        return [f for f in self._files if any(word in text for text in f.comment_texts())]

    def comment_texts_in(self, element: CodeElement, skip: Iterable[CodeElement] = ()) -> list[str]:
        """Text of every comment within ``element``, its doc comment included.

        Comments inside any element of ``skip`` are left out.
        """
        source = self.file_of(element)
        span = element.full_range
        skipped = [s.full_range for s in skip]
        return [
            c.substring(source.text)
            for c in source.comment_ranges
            if span.contains(c) and not any(r.contains(c) for r in skipped)
        ]

    def _class(self, element_id: int) -> ClassElement:
        element = self._elements[element_id]
        assert isinstance(element, ClassElement)
        return element

    def _resolve(self, ids: Iterable[int]) -> Iterator[CodeElement]:
        for element_id in ids:
            yield self._elements[element_id]
