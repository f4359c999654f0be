"""Evidence collection: which documented elements mention which permissions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from permminer.codemodel.models import ClassElement, CodeElement, CodeModel
from permminer.core.logging import get_logger
from permminer.mining.scanner import OccurrenceScanner

log = get_logger(__name__)

DEFAULT_HIDDEN_MARKERS = ("@hide", "@removed")


def is_hidden(element: CodeElement, markers: Iterable[str] = DEFAULT_HIDDEN_MARKERS) -> bool:
    """Hidden elements carry a hide/removed doc marker or are not public."""
    doc = element.doc_text
    return any(marker in doc for marker in markers) or not element.is_public


@dataclass
class Evidence:
    """Permission -> qualifying elements, in discovery order."""

    by_permission: dict[str, list[CodeElement]] = field(default_factory=dict)

    def by_element(self) -> list[tuple[CodeElement, list[str]]]:
        """Invert to element -> sorted permissions, one entry per element."""
        elements: dict[int, CodeElement] = {}
        permissions: dict[int, set[str]] = {}
        for permission, found in self.by_permission.items():
            for element in found:
                elements.setdefault(element.element_id, element)
                permissions.setdefault(element.element_id, set()).add(permission)
        return [(elements[eid], sorted(permissions[eid])) for eid in elements]

    @property
    def total(self) -> int:
        return sum(len(found) for found in self.by_permission.values())


class EvidenceCollector:
    """Finds public, non-hidden elements whose doc comment mentions a permission."""

    def __init__(
        self,
        model: CodeModel,
        scanner: OccurrenceScanner,
        hidden_markers: Iterable[str] = DEFAULT_HIDDEN_MARKERS,
    ) -> None:
        self._model = model
        self._scanner = scanner
        self._hidden_markers = tuple(hidden_markers)

    def collect(self) -> Evidence:
        evidence = Evidence()
        for permission in self._scanner.vocabulary.permissions:
            evidence.by_permission[permission] = self.collect_permission(permission)
        log.info("evidence_collected", permissions=len(evidence.by_permission), elements=evidence.total)
        return evidence

    def collect_permission(self, permission: str) -> list[CodeElement]:
        vocabulary = self._scanner.vocabulary
        files = self._model.files_with_comment_word(vocabulary.word(permission))
        with_stats = log.is_enabled_for(logging.DEBUG)
        comment_occurrences = doc_occurrences = 0

        result: list[CodeElement] = []
        for source in files:
            for cls in self._model.top_level_classes(source):
                if vocabulary.is_excluded(cls.qualified_name):
                    log.debug("evidence_class_excluded", class_name=cls.qualified_name, excluded=True)
                    continue
                if with_stats:
                    com, javadoc = self._class_stats(cls, permission)
                    comment_occurrences += com
                    doc_occurrences += javadoc
                result.extend(self._scan_class(cls, permission))

        log.debug(
            "evidence_files_found",
            permission=permission,
            files=len(files),
            comment_occurrences=comment_occurrences,
            doc_occurrences=doc_occurrences,
        )
        return result

    def _scan_class(self, cls: ClassElement, permission: str) -> Iterator[CodeElement]:
        for element in self._candidates(cls):
            if element.doc_comment is None:
                continue
            doc = element.doc_comment.text
            if not self._scanner.contains(doc, permission):
                continue
            hidden = is_hidden(element, self._hidden_markers)
            occurrences = self._scanner.count(doc, permission)
            log.debug(
                "evidence_element_scanned",
                permission=permission,
                element=element.name,
                kind=type(element).__name__,
                occurrences=occurrences,
                hidden=hidden,
            )
            if occurrences > 0 and not hidden:
                yield element

    def _candidates(self, cls: ClassElement) -> Iterator[CodeElement]:
        """``cls``, its members and nested classes, pruning excluded subtrees."""
        yield cls
        yield from self._model.members(cls)
        for nested in self._model.nested_classes(cls):
            if self._scanner.vocabulary.is_excluded(nested.qualified_name):
                log.debug("evidence_class_excluded", class_name=nested.qualified_name, excluded=True)
                continue
            yield from self._candidates(nested)

    def _class_stats(self, cls: ClassElement, permission: str) -> tuple[int, int]:
        comments = self._model.comment_texts_in(cls, skip=self._excluded_nested(cls))
        com = self._scanner.count_all(comments, permission)
        javadoc = self._scanner.count_all(_doc_comments(comments), permission)
        log.debug(
            "evidence_class_scanned",
            class_name=cls.qualified_name,
            permission=permission,
            com=com,
            javadoc=javadoc,
        )
        return com, javadoc

    def _excluded_nested(self, cls: ClassElement) -> list[ClassElement]:
        excluded: list[ClassElement] = []
        for nested in self._model.nested_classes(cls):
            if self._scanner.vocabulary.is_excluded(nested.qualified_name):
                excluded.append(nested)
            else:
                excluded.extend(self._excluded_nested(nested))
        return excluded


def _doc_comments(texts: Iterable[str]) -> Iterator[str]:
    return (text for text in texts if text.startswith("/**"))
