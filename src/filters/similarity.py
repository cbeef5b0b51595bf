# src/filters/similarity.py

"""Token-set Jaccard similarity used for match confidence."""

MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> set[str]:
    """Whitespace tokens longer than two characters."""
    return {w for w in text.split() if len(w) >= MIN_TOKEN_LENGTH}


def similarity(first: str, second: str) -> float:
    """Jaccard index of the two token sets, in ``[0, 1]``.

    Callers lowercase their inputs; comparison is case-sensitive.
    Two texts with no qualifying tokens score 0.
    """
    a = tokenize(first)
    b = tokenize(second)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)
