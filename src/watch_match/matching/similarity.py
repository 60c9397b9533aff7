"""String similarity between short watch descriptor values.

Uses RapidFuzz for the two underlying metrics:

- Jaro-Winkler, which rewards a shared prefix and suits short
  identifiers such as brand and model names.
- A Levenshtein ratio (``1 - distance / max_len``), which is more
  forgiving of typos and reordering in longer descriptive text.

Both inputs are case-folded and trimmed before comparison.  Missing or
blank input on either side always scores 0.0; identical normalised
strings always score 1.0.
"""

from __future__ import annotations

from typing import Literal

from rapidfuzz.distance import JaroWinkler, Levenshtein

SimilarityMode = Literal["jaro-winkler", "levenshtein", "auto"]

# Average normalised length below which ``auto`` picks Jaro-Winkler.
AUTO_SHORT_LENGTH = 20


def normalize_value(value: str | None) -> str:
    """Case-fold and trim a value; ``None`` and non-strings become ``""``."""
    if not value or not isinstance(value, str):
        return ""
    return value.strip().casefold()


def jaro_winkler_similarity(a: str | None, b: str | None) -> float:
    """Prefix-biased similarity in [0, 1]."""
    s1 = normalize_value(a)
    s2 = normalize_value(b)
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    return JaroWinkler.normalized_similarity(s1, s2)


def levenshtein_similarity(a: str | None, b: str | None) -> float:
    """Edit-distance similarity ``1 - distance / max(len(a), len(b))``."""
    s1 = normalize_value(a)
    s2 = normalize_value(b)
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def calculate_string_score(
    a: str | None, b: str | None, mode: SimilarityMode = "auto"
) -> float:
    """Compute similarity between two values with the requested metric.

    In ``auto`` mode the metric is chosen from the average normalised
    length of the two strings: Jaro-Winkler below
    ``AUTO_SHORT_LENGTH`` characters, Levenshtein otherwise.

    Returns a float in [0, 1].

    Raises:
        ValueError: If ``mode`` is not a known similarity mode.
    """
    s1 = normalize_value(a)
    s2 = normalize_value(b)

    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0

    if mode == "auto":
        avg_len = (len(s1) + len(s2)) / 2
        mode = "jaro-winkler" if avg_len < AUTO_SHORT_LENGTH else "levenshtein"

    if mode == "jaro-winkler":
        return jaro_winkler_similarity(s1, s2)
    if mode == "levenshtein":
        return levenshtein_similarity(s1, s2)
    raise ValueError(f"Unknown similarity mode: {mode!r}")
