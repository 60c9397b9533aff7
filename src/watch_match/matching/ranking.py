"""Result ranking."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from watch_match.matching.pipeline import MatchResult


def rank_matches(matches: list[MatchResult], max_results: int = 5) -> list[MatchResult]:
    """Sort matches by score, best first, and keep the top ``max_results``.

    No score floor is applied: weak matches stay in the list so that a
    reviewer can judge them by their confidence tier.  Ties keep their
    input order.
    """
    ranked = sorted(matches, key=lambda m: m.match_score, reverse=True)
    return ranked[:max_results]
