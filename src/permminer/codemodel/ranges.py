"""Text ranges and line/offset conversion over a source file."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open ``[start, end)`` span of character offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def intersects(self, other: TextRange) -> bool:
        """True when the ranges share a point; touching ranges intersect."""
        return self.start <= other.end and other.start <= self.end

    def union(self, other: TextRange) -> TextRange:
        return TextRange(min(self.start, other.start), max(self.end, other.end))

    def contains(self, other: TextRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def shift(self, delta: int) -> TextRange:
        return TextRange(self.start + delta, self.end + delta)

    def substring(self, text: str) -> str:
        return text[self.start : self.end]


class LineIndex:
    """Offset <-> line conversion for one text blob.

    Lines are 0-based. ``line_end_offset`` points at the line terminator,
    so a line's text is ``text[line_start_offset(n):line_end_offset(n)]``.
    """

    __slots__ = ("_text", "_starts")

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        pos = text.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = text.find("\n", pos + 1)
        self._starts = starts

    @property
    def line_count(self) -> int:
        return len(self._starts)

    @property
    def text_length(self) -> int:
        return len(self._text)

    def line_number(self, offset: int) -> int:
        if offset < 0 or offset > len(self._text):
            raise IndexError(f"Offset {offset} outside text of length {len(self._text)}")
        return bisect_right(self._starts, offset) - 1

    def line_start_offset(self, line: int) -> int:
        self._check_line(line)
        return self._starts[line]

    def line_end_offset(self, line: int) -> int:
        self._check_line(line)
        if line + 1 < len(self._starts):
            end = self._starts[line + 1] - 1
            if end > self._starts[line] and self._text[end - 1] == "\r":
                end -= 1
            return end
        return len(self._text)

    def line_range(self, line: int) -> TextRange:
        return TextRange(self.line_start_offset(line), self.line_end_offset(line))

    def has_line(self, line: int) -> bool:
        return 0 <= line < len(self._starts)

    def expand_to_lines(self, span: TextRange) -> TextRange:
        """Grow ``span`` to the full lines it touches."""
        first = self.line_number(span.start)
        last = self.line_number(span.end)
        return TextRange(self.line_start_offset(first), self.line_end_offset(last))

    def _check_line(self, line: int) -> None:
        if not self.has_line(line):
            raise IndexError(f"Line {line} outside 0..{len(self._starts) - 1}")
