"""Unit tests for the similarity scorer."""

import pytest

from commentguard.analyzers.similarity import (
    MIN_COMPARABLE_LENGTH,
    is_comparable,
    levenshtein_distance,
    normalize_strict,
    normalize_whitespace,
    score,
    similarity,
)


class TestLevenshtein:
    """Tests for edit distance."""

    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
        ("abc", "acb", 2),
    ])
    def test_distance(self, a, b, expected):
        """Test known edit distances."""
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        """Test that argument order does not matter."""
        assert levenshtein_distance("intention", "execution") == levenshtein_distance("execution", "intention")


class TestNormalization:
    """Tests for text normalization."""

    def test_whitespace_normalization(self):
        """Test that whitespace runs collapse and ends are trimmed."""
        assert normalize_whitespace("  retry \t the   call \n") == "retry the call"

    def test_strict_normalization_drops_punctuation_and_case(self):
        """Test that only the wording survives strict normalization."""
        assert normalize_strict(" Retry the call, again! ") == "retrythecallagain"

    def test_strict_normalization_applies_nfkc(self):
        """Test that full-width characters are folded."""
        assert normalize_strict("ＡＢＣ　１２３") == "abc123"

    def test_strict_normalization_keeps_cjk(self):
        """Test that CJK letters are kept while CJK punctuation is dropped."""
        assert normalize_strict("再試行する。") == "再試行する"


class TestScore:
    """Tests for the similarity ratio."""

    def test_identical(self):
        """Test that identical texts have similarity 1."""
        assert similarity("retry the call", "retry the call") == 1.0

    def test_empty_side(self):
        """Test that an empty side yields similarity 0."""
        assert similarity("", "retry the call") == 0.0
        assert similarity("   ", "retry the call") == 0.0

    def test_score_breakdown(self):
        """Test the fields of a comparison."""
        result = score("abcdefghij", "abcdefghik")
        assert result.distance == 1
        assert result.max_len == 10
        assert result.ratio == pytest.approx(0.1)
        assert result.similarity == pytest.approx(0.9)

    def test_custom_normalizer(self):
        """Test that the normalizer is applied before comparison."""
        assert similarity("Retry, the call!", "retry the call", normalize=normalize_strict) == 1.0


class TestComparableFloor:
    """Tests for the minimum comparable length."""

    def test_nine_characters_are_not_comparable(self):
        """Test that a normalized text of 9 characters is never compared."""
        assert MIN_COMPARABLE_LENGTH == 10
        assert not is_comparable("a" * 9)

    def test_ten_characters_are_comparable(self):
        """Test that a normalized text of 10 characters is eligible."""
        assert is_comparable("a" * 10)
