"""Tests for search-bar tokenization."""

import pytest

from smart_search.tokenizer import Token, tokenize


class TestTokenize:
    """Splitting raw input into tokens."""

    def test_commas_and_repeated_whitespace_collapse(self):
        assert [t.text for t in tokenize("chicken, rice   keto")] == ["chicken", "rice", "keto"]

    def test_order_follows_input(self):
        tokens = tokenize("chicken no dairy keto quick dinner")
        assert [t.text for t in tokens] == ["chicken", "no", "dairy", "keto", "quick", "dinner"]

    def test_original_casing_preserved(self):
        assert tokenize("Chicken RICE") == [Token("Chicken"), Token("RICE")]

    @pytest.mark.parametrize("text", ["", "   ", ",,,", " , \t\n ,"])
    def test_separator_only_input_is_empty(self, text):
        """Whitespace and commas alone give no tokens, not an error."""
        assert tokenize(text) == []

    def test_leading_and_trailing_separators_ignored(self):
        tokens = tokenize(", salmon ,")
        assert [t.text for t in tokens] == ["salmon"]
        assert all(t.text for t in tokens)

    def test_hyphenated_words_stay_whole(self):
        assert [t.text for t in tokenize("gluten-free stir-fry")] == ["gluten-free", "stir-fry"]
