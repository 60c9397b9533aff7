"""Identity field scorers.

Brand and model names are short identifiers, so they use Jaro-Winkler
for its prefix weighting.  Reference numbers use the Levenshtein ratio,
where a single transposed or misread digit costs proportionally.
"""

from __future__ import annotations

from watch_match.matching.schemas import WatchIdentity
from watch_match.matching.similarity import calculate_string_score


def brand_score(observed: WatchIdentity, reference: WatchIdentity) -> float:
    """Brand similarity in [0, 1]."""
    return calculate_string_score(observed.brand, reference.brand, "jaro-winkler")


def model_score(observed: WatchIdentity, reference: WatchIdentity) -> float:
    """Model name similarity in [0, 1]."""
    return calculate_string_score(
        observed.model_name, reference.model_name, "jaro-winkler"
    )


def reference_number_score(
    observed: WatchIdentity, reference: WatchIdentity
) -> float:
    """Reference number similarity in [0, 1]."""
    return calculate_string_score(
        observed.reference_number, reference.reference_number, "levenshtein"
    )
