# tests/test_similarity.py

"""Tests for the token-set Jaccard similarity."""

import unittest

from src.filters.similarity import similarity, tokenize


class TestSimilarity(unittest.TestCase):
    """similarity() unit tests."""

    def test_identical_texts_score_one(self) -> None:
        """Identical texts are a perfect match."""
        self.assertEqual(
            similarity("wireless earbuds case", "wireless earbuds case"),
            1.0,
        )

    def test_short_tokens_only_score_zero(self) -> None:
        """Tokens of two characters or fewer never count."""
        self.assertEqual(similarity("a b c", "x y z"), 0.0)

    def test_empty_inputs_score_zero(self) -> None:
        """Two empty strings do not divide by zero."""
        self.assertEqual(similarity("", ""), 0.0)

    def test_disjoint_texts_score_zero(self) -> None:
        """No shared tokens gives zero."""
        self.assertEqual(similarity("wireless earbuds", "led strip"), 0.0)

    def test_partial_overlap(self) -> None:
        """Intersection over union of qualifying tokens."""
        self.assertAlmostEqual(
            similarity("wireless earbuds", "anker wireless earbuds tech"),
            2 / 4,
        )

    def test_symmetric(self) -> None:
        """Order of arguments does not matter."""
        a, b = "phone case clear", "clear phone stand"
        self.assertEqual(similarity(a, b), similarity(b, a))

    def test_duplicates_ignored(self) -> None:
        """Repeated words count once."""
        self.assertEqual(similarity("serum serum", "serum"), 1.0)

    def test_tokenize_drops_short_words(self) -> None:
        """Words of length <= 2 and punctuation-only dashes drop out."""
        self.assertEqual(
            tokenize("led - strip to go lights"),
            {"led", "strip", "lights"},
        )


if __name__ == "__main__":
    unittest.main()
