"""
Similarity Scorer.

Normalized Levenshtein similarity between two comment texts:

    similarity = 1 - distance(a, b) / max(len(a), len(b))

Two normalizations are available. ``normalize_whitespace`` trims and
collapses whitespace runs. ``normalize_strict`` applies NFKC, lowercases and
drops every whitespace, punctuation and symbol character so that only the
wording is compared.
"""

import re
import unicodedata
from typing import Callable, NamedTuple

MIN_COMPARABLE_LENGTH = 10

_WHITESPACE_RE = re.compile(r"\s+")

# Unicode categories removed by the strict normalization:
# punctuation (P*), symbols (S*), separators (Z*)
_DROPPED_CATEGORY_PREFIXES = ("P", "S", "Z")


class SimilarityScore(NamedTuple):
    """Breakdown of one comparison."""

    distance: int
    max_len: int
    ratio: float
    similarity: float


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", (text or "").strip())


def normalize_strict(text: str) -> str:
    normalized = unicodedata.normalize("NFKC", text or "").lower()
    return "".join(
        ch for ch in normalized
        if not ch.isspace() and not unicodedata.category(ch).startswith(_DROPPED_CATEGORY_PREFIXES)
    )


def levenshtein_distance(a: str, b: str) -> int:
    """
    Exact edit distance using a single DP row.

    The row is sized by the shorter string.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        diagonal = row[0]
        row[0] = i
        for j, cb in enumerate(b, start=1):
            above = row[j]
            cost = 0 if ca == cb else 1
            row[j] = min(
                above + 1,         # deletion
                row[j - 1] + 1,    # insertion
                diagonal + cost,   # substitution
            )
            diagonal = above
    return row[len(b)]


def score(a: str, b: str) -> SimilarityScore:
    """Compare two already normalized strings."""
    max_len = max(len(a), len(b))
    if not a or not b:
        return SimilarityScore(distance=max_len, max_len=max_len, ratio=1.0, similarity=0.0)
    distance = levenshtein_distance(a, b)
    ratio = distance / max_len
    return SimilarityScore(distance=distance, max_len=max_len, ratio=ratio, similarity=1.0 - ratio)


def similarity(
    a: str,
    b: str,
    normalize: Callable[[str], str] = normalize_whitespace,
) -> float:
    """Similarity in [0, 1]; 0 when either normalized string is empty."""
    return score(normalize(a), normalize(b)).similarity


def is_comparable(normalized: str) -> bool:
    """Texts shorter than the floor give unreliable ratios and are never compared."""
    return len(normalized) >= MIN_COMPARABLE_LENGTH
