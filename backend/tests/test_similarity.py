"""Tests for string similarity scoring."""

import pytest

from app.services.similarity import levenshtein_distance, similarity


class TestLevenshteinDistance:
    """Test unit-cost edit distance."""

    def test_identical(self):
        assert levenshtein_distance("zomato", "zomato") == 0

    def test_against_empty(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3

    def test_classic_example(self):
        """kitten -> sitting takes three edits."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_symmetric(self):
        assert levenshtein_distance("swigy", "swiggy") == levenshtein_distance("swiggy", "swigy") == 1


class TestSimilarity:
    """Test bounded similarity in [0, 1]."""

    def test_exact_match_is_one(self):
        """Identical non-empty strings score 1."""
        assert similarity("swiggy", "swiggy") == 1.0

    @pytest.mark.parametrize("a,b", [("", "y"), ("y", ""), ("", "")])
    def test_empty_is_zero(self, a, b):
        """Any empty side scores 0."""
        assert similarity(a, b) == 0.0

    def test_containment(self):
        """A string containing the other scores 0.99 in either direction."""
        assert similarity("starbucks coffee", "starbucks") >= 0.99
        assert similarity("starbucks", "starbucks coffee") == pytest.approx(0.99)

    def test_edit_distance_ratio(self):
        """Otherwise score is 1 - distance / longest length."""
        # kitten/sitting: 3 edits over 7 characters
        assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    def test_typo_scores_high(self):
        """A single-letter typo stays well above the match threshold."""
        assert similarity("zomatto", "zomato") == pytest.approx(1 - 1 / 7)
        assert similarity("swigy", "swiggi") == pytest.approx(1 - 2 / 6)

    def test_unrelated_scores_low(self):
        assert similarity("netflix", "bigbasket") < 0.3

    def test_bounded(self):
        for a, b in [("a", "b"), ("abc", "xyz"), ("ola", "olacabs"), ("rent", "current")]:
            assert 0.0 <= similarity(a, b) <= 1.0
