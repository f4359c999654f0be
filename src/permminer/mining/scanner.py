"""Count and detect permission mentions inside a text fragment."""

from __future__ import annotations

from collections.abc import Iterable

from permminer.mining.vocabulary import PermissionVocabulary


class OccurrenceScanner:
    """Searches text for one permission's term.

    Matching is case-sensitive substring search on the plain word, or the
    permission's regex when the vocabulary defines one. Counts are of
    non-overlapping matches.
    """

    def __init__(self, vocabulary: PermissionVocabulary) -> None:
        self._vocabulary = vocabulary

    @property
    def vocabulary(self) -> PermissionVocabulary:
        return self._vocabulary

    def count(self, text: str, permission: str) -> int:
        pattern = self._vocabulary.pattern(permission)
        if pattern is not None:
            return sum(1 for _ in pattern.finditer(text))
        return text.count(self._vocabulary.word(permission))

    def contains(self, text: str, permission: str) -> bool:
        pattern = self._vocabulary.pattern(permission)
        if pattern is not None:
            return pattern.search(text) is not None
        return self._vocabulary.word(permission) in text

    def count_all(self, texts: Iterable[str], permission: str) -> int:
        return sum(self.count(text, permission) for text in texts)


def short_name(permission: str) -> str:
    """Part of a permission id after the last dot."""
    return permission.rsplit(".", 1)[-1]


def word_offsets(text: str, word: str) -> list[int]:
    """Every start offset of ``word`` in ``text``, overlapping matches included."""
    offsets: list[int] = []
    if not word:
        return offsets
    index = text.find(word)
    while index != -1:
        offsets.append(index)
        index = text.find(word, index + 1)
    return offsets
