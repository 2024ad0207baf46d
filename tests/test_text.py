"""
Tests for text normalization used by both indexing and querying.
"""

from catalog.utils.text import normalize, trigrams, words


class TestNormalize:
    """Test cases for normalize()."""

    def test_lowercases_and_trims(self):
        assert normalize("  Red SHOE ") == "red shoe"

    def test_collapses_whitespace_runs(self):
        """Tabs, newlines and repeated spaces become one space."""
        assert normalize("red \t\n  shoe") == "red shoe"

    def test_empty_and_blank(self):
        assert normalize("") == ""
        assert normalize("   ") == ""

    def test_idempotent(self):
        once = normalize("  Big   RED\tShoe ")
        assert normalize(once) == once


class TestWords:
    """Test cases for words()."""

    def test_splits_on_non_alphanumerics(self):
        assert words("red-shoe, size 10") == ["red", "shoe", "size", "10"]

    def test_drops_single_characters(self):
        assert words("a b cd e") == ["cd"]

    def test_no_tokens(self):
        assert words("!!") == []
        assert words("") == []


class TestTrigrams:
    """Test cases for trigrams()."""

    def test_overlapping_windows(self):
        assert trigrams("shoe") == ["sho", "hoe"]

    def test_includes_spaces(self):
        assert trigrams("a bc") == ["a b", " bc"]

    def test_short_text_has_none(self):
        assert trigrams("ab") == []
        assert trigrams("") == []

    def test_exact_length(self):
        assert trigrams("red") == ["red"]
