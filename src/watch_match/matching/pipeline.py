"""Matching pipeline.

Gates, scores, analyses and ranks reference candidates for one watch
description.  All functions are PURE -- no database access.  Each
candidate is evaluated independently of the others, so the per-candidate
step can be run in any order; only the final ranking sorts.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from watch_match.exceptions import MatchingCancelled
from watch_match.matching.combiner import (
    ComponentScores,
    ConfidenceTier,
    confidence_tier,
    score_match,
)
from watch_match.matching.config import MatchingConfig
from watch_match.matching.discrepancy import (
    FieldDiscrepancy,
    calculate_discrepancies,
    summarize_discrepancies,
)
from watch_match.matching.gating import gate_candidates, meets_minimum_criteria
from watch_match.matching.ranking import rank_matches
from watch_match.matching.schemas import ReferenceWatch, WatchDescription

logger = structlog.get_logger()


class CancelSignal(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event`` or ``asyncio.Event``."""

    def is_set(self) -> bool: ...


@dataclass
class MatchResult:
    """One accepted reference candidate with its scores and discrepancies.

    Attributes:
        reference_watch: The matched library record.
        match_score: Weighted match score (0-100).
        component_scores: Brand, model, reference and physical scores (0-100).
        confidence_tier: Tier derived from ``match_score``.
        discrepancies: Field-level comparison outcomes.
    """

    reference_watch: ReferenceWatch
    match_score: float
    component_scores: ComponentScores
    confidence_tier: ConfidenceTier
    discrepancies: list[FieldDiscrepancy]


@dataclass
class MatchOutcome:
    """Aggregate result of matching one description.

    Attributes:
        matches: Ranked matches, best first, at most ``max_results``.
        total_candidates_retrieved: Candidates handed in by the library.
        total_candidates_accepted: Candidates that passed gating and were
            scored (before ranking truncates the list).
        comparison_recorded: Whether the best-match comparison record was
            stored.  Set by the orchestrator; ``False`` for pure runs.
    """

    matches: list[MatchResult]
    total_candidates_retrieved: int
    total_candidates_accepted: int
    comparison_recorded: bool = False

    @property
    def best_match(self) -> MatchResult | None:
        return self.matches[0] if self.matches else None


@dataclass
class ComparisonRecord:
    """Best-match payload handed to the reference library for storage."""

    reference_watch_id: str
    ai_analysis: dict[str, Any]
    match_score: float
    brand_match_score: float
    model_match_score: float
    reference_match_score: float
    physical_match_score: float
    discrepancies: list[dict[str, Any]]
    discrepancy_summary: str
    session_id: str | None = None


def evaluate_candidate(
    description: WatchDescription,
    reference: ReferenceWatch,
    config: MatchingConfig,
) -> MatchResult | None:
    """Score one candidate and analyse its discrepancies.

    Returns ``None`` if the recomputed brand/model scores miss the
    minimum criteria; discrepancy analysis is skipped in that case.
    """
    match_score, scores = score_match(description, reference, config.weights)

    if not meets_minimum_criteria(scores.brand, scores.model, config.similarity):
        logger.debug(
            "candidate_rejected",
            reference_id=reference.id,
            brand_score=round(scores.brand, 1),
            model_score=round(scores.model, 1),
        )
        return None

    return MatchResult(
        reference_watch=reference,
        match_score=match_score,
        component_scores=scores,
        confidence_tier=confidence_tier(match_score, config.thresholds),
        discrepancies=calculate_discrepancies(description, reference),
    )


def score_candidates(
    description: WatchDescription,
    candidates: list[ReferenceWatch],
    config: MatchingConfig,
    cancel: CancelSignal | None = None,
) -> MatchOutcome:
    """Gate, score and rank candidates.  PURE FUNCTION -- no DB access.

    1. Re-checks brand and model similarity against the configured floors.
    2. Scores each surviving candidate and analyses its discrepancies.
    3. Ranks by match score and truncates to ``config.max_results``.

    Args:
        description: The watch description being matched.
        candidates: Reference records from the library's coarse search.
        config: Full matching configuration.
        cancel: Optional signal checked between candidates.

    Returns:
        A ``MatchOutcome`` with ranked matches and candidate counts.

    Raises:
        MatchingCancelled: If ``cancel`` is set before all candidates
            have been scored.
    """
    gated, stats = gate_candidates(description, candidates, config.similarity)

    results: list[MatchResult] = []
    for candidate in gated:
        if cancel is not None and cancel.is_set():
            raise MatchingCancelled(
                f"Matching cancelled after {len(results)} of {len(gated)} candidates"
            )
        result = evaluate_candidate(description, candidate, config)
        if result is not None:
            results.append(result)

    return MatchOutcome(
        matches=rank_matches(results, config.max_results),
        total_candidates_retrieved=stats.retrieved,
        total_candidates_accepted=len(results),
    )


def build_comparison_record(
    description: WatchDescription,
    match: MatchResult,
    session_id: str | None = None,
) -> ComparisonRecord:
    """Build the storage payload for a best match."""
    summary = summarize_discrepancies(match.discrepancies)
    critical = len(summary.critical_issues)
    scores = match.component_scores
    return ComparisonRecord(
        reference_watch_id=match.reference_watch.id,
        ai_analysis=description.model_dump(mode="json"),
        match_score=match.match_score,
        brand_match_score=scores.brand,
        model_match_score=scores.model,
        reference_match_score=scores.reference,
        physical_match_score=scores.physical,
        discrepancies=[dataclasses.asdict(d) for d in match.discrepancies],
        discrepancy_summary=(
            f"{summary.total} field(s) compared, {critical} critical issue(s)"
        ),
        session_id=session_id,
    )
