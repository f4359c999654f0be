"""Tests for permission occurrence scanning."""

import pytest

from permminer.mining.scanner import OccurrenceScanner, short_name, word_offsets
from permminer.mining.vocabulary import PermissionVocabulary

CAMERA = "android.permission.CAMERA"
AUDIO = "android.permission.RECORD_AUDIO"


@pytest.fixture
def scanner(vocabulary: PermissionVocabulary) -> OccurrenceScanner:
    return OccurrenceScanner(vocabulary)


class TestCount:
    """Occurrence counting."""

    def test_plain_word_counts_non_overlapping(self) -> None:
        vocabulary = PermissionVocabulary.from_mappings({"p.AAA": "AAA"})
        assert OccurrenceScanner(vocabulary).count("AAA BBB AAA", "p.AAA") == 2

    def test_plain_word_is_case_sensitive(self, scanner: OccurrenceScanner) -> None:
        assert scanner.count("needs record_audio", AUDIO) == 0
        assert scanner.count("needs RECORD_AUDIO", AUDIO) == 1

    def test_regex_excludes_underscored_names(self, scanner: OccurrenceScanner) -> None:
        assert scanner.count("xCAMERAx CAMERA_X", CAMERA) == 1

    def test_regex_needs_surrounding_characters(self, scanner: OccurrenceScanner) -> None:
        assert scanner.count("CAMERA", CAMERA) == 0
        assert scanner.count(" CAMERA ", CAMERA) == 1

    def test_count_all_sums_texts(self, scanner: OccurrenceScanner) -> None:
        assert scanner.count_all(["RECORD_AUDIO", "", "RECORD_AUDIO RECORD_AUDIO"], AUDIO) == 3


class TestContains:
    """Presence checks."""

    def test_contains_uses_pattern(self, scanner: OccurrenceScanner) -> None:
        assert scanner.contains("the #CAMERA} permission", CAMERA)
        assert not scanner.contains("FLAG_CAMERA_ON", CAMERA)

    def test_contains_plain_word(self, scanner: OccurrenceScanner) -> None:
        assert scanner.contains("x RECORD_AUDIO y", AUDIO)


class TestHelpers:
    """short_name and word_offsets."""

    def test_short_name(self) -> None:
        assert short_name("android.permission.CAMERA") == "CAMERA"
        assert short_name("CAMERA") == "CAMERA"

    def test_word_offsets_overlap(self) -> None:
        assert word_offsets("AAAA", "AA") == [0, 1, 2]

    def test_word_offsets_missing_or_empty(self) -> None:
        assert word_offsets("abc", "x") == []
        assert word_offsets("abc", "") == []
