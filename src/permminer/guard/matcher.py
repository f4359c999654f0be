"""Locate the source statements behind unguarded report lines."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from permminer.codemodel.models import CodeModel, MethodElement
from permminer.codemodel.ranges import LineIndex, TextRange
from permminer.core.logging import get_logger
from permminer.guard.models import GuardDiagnostic, GuardReportEntry, GuardStatement

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class StatementMatch:
    statement: GuardStatement
    index: int
    text_range: TextRange


def match_statements(
    statement_ranges: Sequence[TextRange],
    report: Sequence[GuardStatement],
    lines: LineIndex,
    callback: str = "",
) -> Iterator[StatementMatch]:
    """Merge unguarded report lines against sorted statement ranges.

    One cursor moves forward over ``statement_ranges`` for the whole
    report and is never rewound. A report line with no intersecting
    statement ahead of the cursor is logged and skipped.
    """
    cursor = 0
    for reported in report:
        if reported.all_guarded:
            continue
        line = reported.line - 1
        if not lines.has_line(line):
            log.error("guard_line_out_of_range", callback=callback, line=reported.line, lines=lines.line_count)
            continue
        target = lines.line_range(line)
        while cursor < len(statement_ranges) and not statement_ranges[cursor].intersects(target):
            cursor += 1
        if cursor == len(statement_ranges):
            log.error(
                "guard_statement_not_found",
                callback=callback,
                line=reported.line,
                permissions=list(reported.unchecked_permissions),
            )
            continue
        yield StatementMatch(statement=reported, index=cursor, text_range=statement_ranges[cursor])


class GuardGapMatcher:
    """Turns report entries into diagnostics anchored on code model statements."""

    def __init__(self, model: CodeModel) -> None:
        self._model = model

    def find_callback(self, entry: GuardReportEntry) -> MethodElement | None:
        method = self._model.find_method(entry.owner_class_name, entry.sub_signature)
        if method is None:
            log.warning("guard_callback_unresolved", callback=str(entry))
        return method

    def check(self, method: MethodElement, entry: GuardReportEntry) -> list[GuardDiagnostic]:
        source = self._model.file_of(method)
        lines = source.line_index
        diagnostics = []
        for match in match_statements(method.statement_ranges, entry.statements, lines, str(entry)):
            diagnostics.append(
                GuardDiagnostic(
                    path=source.path,
                    line=match.statement.line,
                    text_range=match.text_range,
                    permissions=match.statement.unchecked_permissions,
                    callback=str(entry),
                )
            )
        return diagnostics

    def check_all(self, entries: Sequence[GuardReportEntry]) -> list[GuardDiagnostic]:
        """Diagnostics for every resolvable callback, in file then offset order."""
        diagnostics: list[GuardDiagnostic] = []
        for entry in entries:
            method = self.find_callback(entry)
            if method is not None:
                diagnostics.extend(self.check(method, entry))
        return sorted(diagnostics, key=lambda d: (str(d.path), d.text_range.start))
