# src/storage/cache_keys.py

"""Stable cache keys for link and keyword searches."""

from collections.abc import Sequence

URL_PREFIX = "url:"
KEYWORDS_PREFIX = "keywords:"
KEYWORD_DELIMITER = ","


def derive_key(
    url: str | None = None,
    keywords: Sequence[str] = (),
) -> str:
    """Return the cache key for a search.

    A URL, when present, is the whole identity and is used verbatim
    (case-sensitive, no normalisation).  Keyword searches sort their
    terms so ``["b", "a"]`` and ``["a", "b"]`` share one entry.
    """
    if url:
        return f"{URL_PREFIX}{url}"
    return KEYWORDS_PREFIX + KEYWORD_DELIMITER.join(sorted(keywords))
