"""Text normalization and string distance helpers for local matching."""

import re
import unicodedata

from rapidfuzz.distance import Levenshtein

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """
    Canonical form used by every matcher.

    NFKC folds full-width characters (``ＡＩ`` -> ``AI``), then the text is
    trimmed, lowercased and internal whitespace collapsed to single spaces.

    Examples:
        >>> normalize_text("  ＡＩ  工程师 ")
        'ai 工程师'
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKC", text)
    return _WHITESPACE_RE.sub(" ", folded).strip().lower()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    return Levenshtein.distance(a, b)
