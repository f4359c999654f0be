"""Context windows around mention offsets, coalesced into disjoint ranges."""

from __future__ import annotations

from collections.abc import Iterable

from permminer.codemodel.ranges import TextRange


def context_window(offset: int, width: int, text_length: int) -> TextRange:
    """``[offset - width, offset + width)`` clipped to ``[0, text_length)``."""
    start = max(0, offset - width)
    end = min(text_length, offset + width)
    return TextRange(start, max(start, end))


def merge_context_ranges(offsets: Iterable[int], width: int, text_length: int) -> list[TextRange]:
    """Build a window per offset and merge windows that intersect or touch.

    ``offsets`` must be sorted ascending. The result is sorted and pairwise
    disjoint, and each input window lies inside exactly one output range.
    """
    ranges: list[TextRange] = []
    current: TextRange | None = None
    for offset in offsets:
        window = context_window(offset, width, text_length)
        if current is None:
            current = window
        elif current.intersects(window):
            current = current.union(window)
        else:
            ranges.append(current)
            current = window
    if current is not None:
        ranges.append(current)
    return ranges
