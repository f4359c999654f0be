"""Turn a code element and its permissions into a canonical definition."""

from __future__ import annotations

import re
from collections.abc import Collection

from permminer.codemodel.models import (
    ClassElement,
    CodeElement,
    CodeModel,
    FieldElement,
    MethodElement,
)
from permminer.core.errors import InternalError
from permminer.mining.intervals import merge_context_ranges
from permminer.mining.models import (
    ParametricSensDef,
    PermissionDefinition,
    PermissionRel,
    TargetKind,
)
from permminer.mining.scanner import short_name, word_offsets

DEFAULT_CONTEXT_WIDTH = 150

_GENERIC_RE = re.compile(r"<[^<>]*>")
_COMMA_SPACE_RE = re.compile(r"\s*,\s*")


def process_inner_classes(name: str) -> str:
    """Dot-join inner class names: ``Outer$Inner`` -> ``Outer.Inner``."""
    return name.replace("$", ".")


def cleanup_signature(signature: str) -> str:
    """Erase generic arguments and drop spaces around parameter commas."""
    previous = None
    while previous != signature:
        previous = signature
        signature = _GENERIC_RE.sub("", signature)
    return _COMMA_SPACE_RE.sub(",", signature).strip()


def method_signature(method: MethodElement) -> str:
    """``returnType name(T1,T2)``; constructors become ``void <init>(T1,T2)``."""
    params = ",".join(method.parameter_types)
    if method.is_constructor:
        return f"void <init>({params})"
    return cleanup_signature(f"{method.return_type} {method.name}({params})")


class DefinitionBuilder:
    """Builds PermissionDefinition and ParametricSensDef records."""

    def __init__(self, model: CodeModel, context_width: int = DEFAULT_CONTEXT_WIDTH) -> None:
        self._model = model
        self._context_width = context_width

    def build(self, element: CodeElement, permissions: Collection[str]) -> PermissionDefinition:
        target, kind = self.target_and_kind(element)
        ordered = tuple(sorted(set(permissions)))
        return PermissionDefinition(
            class_name=self.class_name(element),
            target=target,
            target_kind=kind,
            permissions=ordered,
            comment=self.evidence_comment(element, ordered),
            relation=PermissionRel.ALL_OF,
            conditional=True,
        )

    def build_parametric(self, element: CodeElement, permissions: Collection[str] = ()) -> ParametricSensDef:
        target, _ = self.target_and_kind(element)
        return ParametricSensDef(class_name=self.class_name(element), target=target)

    def class_name(self, element: CodeElement) -> str:
        cls = element if isinstance(element, ClassElement) else self._model.owner(element)
        if cls is None:
            raise InternalError.unexpected("member without owning class", element=element.name)
        return process_inner_classes(cls.qualified_name)

    @staticmethod
    def target_and_kind(element: CodeElement) -> tuple[str | None, TargetKind]:
        if isinstance(element, ClassElement):
            return None, TargetKind.CLASS
        if isinstance(element, FieldElement):
            return process_inner_classes(element.name), TargetKind.FIELD
        if isinstance(element, MethodElement):
            return method_signature(element), TargetKind.METHOD
        raise InternalError.unexpected(
            f"unsupported element kind {type(element).__name__}",
            element=element.name,
        )

    def evidence_comment(self, element: CodeElement, permissions: Collection[str]) -> str | None:
        """Doc comment lines around every mention of the permissions' short names.

        Returns None when the element has no doc comment or no short name
        occurs in it.
        """
        doc = element.doc_comment
        if doc is None:
            return None
        offsets = sorted(
            offset for permission in permissions for offset in word_offsets(doc.text, short_name(permission))
        )
        ranges = merge_context_ranges(offsets, self._context_width, len(doc.text))
        if not ranges:
            return None

        source = self._model.file_of(element)
        lines = source.line_index
        fragments = []
        for span in ranges:
            expanded = lines.expand_to_lines(span.shift(doc.text_range.start))
            fragments.append(expanded.substring(source.text) + "\n")
        return "\n" + "".join(fragments)
