# tests/test_search_request.py

"""Tests for raw input validation and keyword tokenising."""

import unittest

from src.models.search_request import (
    InvalidSearchRequest,
    SearchRequest,
    tokenize_keywords,
)


class TestTokenizeKeywords(unittest.TestCase):
    """tokenize_keywords unit tests."""

    def test_splits_on_spaces_and_commas(self) -> None:
        self.assertEqual(
            tokenize_keywords("wireless, earbuds  case"),
            ["wireless", "earbuds", "case"],
        )

    def test_short_tokens_dropped(self) -> None:
        self.assertEqual(tokenize_keywords("a to led"), ["led"])

    def test_lowercased_and_deduplicated(self) -> None:
        self.assertEqual(
            tokenize_keywords("LED led Strip"), ["led", "strip"]
        )

    def test_blank(self) -> None:
        self.assertEqual(tokenize_keywords("   "), [])


class TestSearchRequest(unittest.TestCase):
    """SearchRequest.from_input unit tests."""

    def test_both_blank_rejected(self) -> None:
        with self.assertRaises(InvalidSearchRequest) as ctx:
            SearchRequest.from_input("  ", "")
        self.assertIn("paste a link", str(ctx.exception))

    def test_url_only(self) -> None:
        request = SearchRequest.from_input(" https://youtu.be/x ", "")
        self.assertEqual(request.url, "https://youtu.be/x")
        self.assertEqual(request.keywords, [])
        self.assertTrue(request.is_link_search)

    def test_keywords_only(self) -> None:
        request = SearchRequest.from_input("", "wireless earbuds")
        self.assertIsNone(request.url)
        self.assertEqual(request.keywords, ["wireless", "earbuds"])
        self.assertFalse(request.is_link_search)

    def test_invalid_request_is_value_error(self) -> None:
        self.assertTrue(issubclass(InvalidSearchRequest, ValueError))


if __name__ == "__main__":
    unittest.main()
