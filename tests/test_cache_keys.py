# tests/test_cache_keys.py

"""Tests for cache key derivation."""

import unittest

from src.storage.cache_keys import derive_key


class TestDeriveKey(unittest.TestCase):
    """derive_key unit tests."""

    def test_keyword_order_irrelevant(self) -> None:
        """["b", "a"] and ["a", "b"] share a key."""
        self.assertEqual(
            derive_key(keywords=["b", "a"]),
            derive_key(keywords=["a", "b"]),
        )

    def test_keyword_grammar(self) -> None:
        """Keywords are sorted and comma-joined after the prefix."""
        self.assertEqual(
            derive_key(keywords=["earbuds", "wireless"]),
            "keywords:earbuds,wireless",
        )

    def test_url_used_verbatim(self) -> None:
        """URLs are neither lowercased nor normalised."""
        url = "https://www.TikTok.com/@user/video/123?ref=Share"
        self.assertEqual(derive_key(url), f"url:{url}")

    def test_url_takes_precedence_over_keywords(self) -> None:
        """When a URL is present, keywords do not affect the key."""
        url = "https://youtu.be/abc"
        self.assertEqual(
            derive_key(url, ["earbuds"]), derive_key(url, ["serum"])
        )

    def test_url_case_sensitive(self) -> None:
        """Differently cased URLs are different searches."""
        self.assertNotEqual(
            derive_key("https://x.com/A"), derive_key("https://x.com/a")
        )

    def test_empty_keywords_valid(self) -> None:
        """No keywords still yields a key."""
        self.assertEqual(derive_key(), "keywords:")

    def test_input_not_mutated(self) -> None:
        """Sorting does not reorder the caller's list."""
        keywords = ["b", "a"]
        derive_key(keywords=keywords)
        self.assertEqual(keywords, ["b", "a"])

    def test_empty_url_falls_back_to_keywords(self) -> None:
        """An empty URL string is treated as absent."""
        self.assertEqual(derive_key("", ["led"]), "keywords:led")


if __name__ == "__main__":
    unittest.main()
