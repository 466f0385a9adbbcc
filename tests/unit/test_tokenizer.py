# ABOUTME: Unit tests for search tokenization and order-preserving deduplication.
# ABOUTME: Covers Unicode letters, digits, separators, and empty input.

import pytest

from inpxshelf.search.tokenizer import tokenize, unique_tokens


class TestTokenize:
    """Tests for tokenize()."""

    def test_empty_input(self) -> None:
        assert tokenize("") == []

    def test_only_separators(self) -> None:
        """Punctuation and whitespace never produce tokens."""
        assert tokenize("  !!! --- ... ,,, ") == []

    def test_lowercases(self) -> None:
        assert tokenize("The Name OF the Rose") == ["the", "name", "of", "the", "rose"]

    def test_cyrillic(self) -> None:
        assert tokenize("Невероятные Приключения") == ["невероятные", "приключения"]

    def test_separators_are_dropped_not_replaced(self) -> None:
        """Apostrophes and hyphens split words; nothing is glued back together."""
        assert tokenize("Foucault's sci-fi") == ["foucault", "s", "sci", "fi"]

    def test_digits_are_tokens(self) -> None:
        assert tokenize("Catch-22 (1961)") == ["catch", "22", "1961"]

    def test_dotted_capital_i_drops_combining_mark(self) -> None:
        assert tokenize("İstanbul") == ["istanbul"]

    def test_underscore_separates(self) -> None:
        assert tokenize("sf_fantasy") == ["sf", "fantasy"]

    def test_keeps_duplicates_in_order(self) -> None:
        assert tokenize("b a b") == ["b", "a", "b"]

    @pytest.mark.parametrize(
        "text",
        [
            "Hello, World!",
            "author:\"Иван Иванов\"",
            "x\ty\nz",
            "«Мастер и Маргарита»",
            "1+1=2",
            "İstanbul",
        ],
    )
    def test_tokens_are_lowercase_alphanumeric(self, text: str) -> None:
        for token in tokenize(text):
            assert token
            assert token == token.lower()
            assert token.isalnum()


class TestUniqueTokens:
    """Tests for unique_tokens()."""

    def test_first_occurrence_wins(self) -> None:
        assert unique_tokens(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_drops_empty_tokens(self) -> None:
        assert unique_tokens(["", "a", ""]) == ["a"]

    def test_idempotent(self) -> None:
        tokens = ["x", "y", "x", "z", "y"]
        once = unique_tokens(tokens)
        assert unique_tokens(once) == once

    def test_empty(self) -> None:
        assert unique_tokens([]) == []
