"""
Unit tests for mathsnap/normalizer.py
"""
import pytest

from mathsnap.errors import InvalidInputError
from mathsnap.normalizer import normalize_delimiters


class TestNormalizeDelimiters:
    """Double-escaped delimiter rewriting"""

    def test_double_escaped_paren(self):
        assert normalize_delimiters(r"\\( x \\)") == r"\( x \)"

    def test_double_escaped_bracket(self):
        assert normalize_delimiters(r"\\[ x \\]") == r"\[ x \]"

    def test_idempotent(self):
        once = normalize_delimiters(r"see \\( x \\) and \\[y\\]")
        assert normalize_delimiters(once) == once
        assert once == r"see \( x \) and \[y\]"

    def test_longer_backslash_runs_collapse(self):
        assert normalize_delimiters(r"\\\(a\\\\)") == r"\(a\)"

    def test_single_escaped_unchanged(self):
        text = r"already \(fine\) and \[fine\]"
        assert normalize_delimiters(text) == text

    def test_other_backslashes_untouched(self):
        text = r"line \\ break, \$5, \frac{a}{b}"
        assert normalize_delimiters(text) == text

    def test_empty_string(self):
        assert normalize_delimiters("") == ""

    @pytest.mark.parametrize("value", [None, 42, b"bytes", ["$x$"]])
    def test_non_string_rejected(self, value):
        with pytest.raises(InvalidInputError):
            normalize_delimiters(value)
