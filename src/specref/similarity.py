"""Edit-distance similarity between normalised definitions.

The drift decision is a single scalar over the whole definition: small
formatting differences stay above the threshold, rewritten content falls
below it. Localised rewrites that keep most characters can still pass;
that trade-off is accepted.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

DEFAULT_SIMILARITY_THRESHOLD = 0.95


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance (substitution, insertion, deletion)."""
    return Levenshtein.distance(a, b)


def similarity_ratio(a: str, b: str) -> float:
    """Return similarity in [0, 1] as ``(len(longer) - distance) / len(longer)``."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    distance = levenshtein_distance(shorter, longer)
    return (len(longer) - distance) / len(longer)


def is_changed(similarity: float, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> bool:
    return similarity < threshold
