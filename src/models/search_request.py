# src/models/search_request.py

"""User search input: a link, free-text keywords, or both."""

import re
from dataclasses import dataclass, field

_SPLIT_RE = re.compile(r"[\s,]+")

MIN_KEYWORD_LENGTH = 3


class InvalidSearchRequest(ValueError):
    """Raised when neither a URL nor keywords were supplied."""


def tokenize_keywords(text: str) -> list[str]:
    """Split keyword text on whitespace/commas, keep tokens longer than 2.

    Tokens are lowercased and de-duplicated, first occurrence wins.
    """
    seen: dict[str, None] = {}
    for token in _SPLIT_RE.split(text.lower()):
        if len(token) >= MIN_KEYWORD_LENGTH:
            seen.setdefault(token, None)
    return list(seen)


@dataclass(frozen=True)
class SearchRequest:
    """A validated search: URL-first, keywords optional."""

    url: str | None = None
    keywords: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @classmethod
    def from_input(
        cls, url_text: str = "", keywords_text: str = ""
    ) -> "SearchRequest":
        """Build a request from raw form input.

        Raises:
            InvalidSearchRequest: both fields are blank.
        """
        url = url_text.strip()
        raw_keywords = keywords_text.strip()
        if not url and not raw_keywords:
            msg = "Please paste a link or enter product keywords"
            raise InvalidSearchRequest(msg)
        return cls(
            url=url or None,
            keywords=tokenize_keywords(raw_keywords),
        )

    @property
    def is_link_search(self) -> bool:
        return self.url is not None
