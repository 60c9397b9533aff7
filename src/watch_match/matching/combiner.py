"""Score combiner and confidence classification.

Combines the four component scores into a single weighted match score
on a 0-100 scale and maps that score onto a confidence tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from watch_match.matching.config import ConfidenceThresholds, ScoringWeights
from watch_match.matching.schemas import ReferenceWatch, WatchDescription
from watch_match.matching.scorers import (
    brand_score,
    model_score,
    physical_score,
    reference_number_score,
)

ConfidenceTier = Literal["excellent", "good", "possible", "poor"]


@dataclass(frozen=True)
class ComponentScores:
    """The four component scores, each on a 0-100 scale."""

    brand: float
    model: float
    reference: float
    physical: float


def combined_score(
    scores: ComponentScores, weights: ScoringWeights | None = None
) -> float:
    """Compute the weighted sum of the component scores.

    Unlike a weighted average, the weights are applied as given, so a
    component with weight 0.40 contributes at most 40 points.  The
    result is clamped to [0, 100].
    """
    if weights is None:
        weights = ScoringWeights()

    weighted = (
        weights.brand * scores.brand
        + weights.model * scores.model
        + weights.reference * scores.reference
        + weights.physical * scores.physical
    )
    return min(max(weighted, 0.0), 100.0)


def component_scores(
    description: WatchDescription, reference: ReferenceWatch
) -> ComponentScores:
    """Score a description against one reference record, component by component."""
    observed_identity = description.watch_identity
    reference_identity = reference.watch_identity
    return ComponentScores(
        brand=brand_score(observed_identity, reference_identity) * 100,
        model=model_score(observed_identity, reference_identity) * 100,
        reference=reference_number_score(observed_identity, reference_identity) * 100,
        physical=physical_score(
            description.physical_observations, reference.physical_observations
        )
        * 100,
    )


def score_match(
    description: WatchDescription,
    reference: ReferenceWatch,
    weights: ScoringWeights | None = None,
) -> tuple[float, ComponentScores]:
    """Return ``(match_score, component_scores)`` for one candidate."""
    scores = component_scores(description, reference)
    return combined_score(scores, weights), scores


def confidence_tier(
    score: float, thresholds: ConfidenceThresholds | None = None
) -> ConfidenceTier:
    """Map a 0-100 match score onto a confidence tier.

    Thresholds are checked from the top down; the first one reached
    wins.  Anything below ``possible`` is ``"poor"``.
    """
    if thresholds is None:
        thresholds = ConfidenceThresholds()

    if score >= thresholds.excellent:
        return "excellent"
    if score >= thresholds.good:
        return "good"
    if score >= thresholds.possible:
        return "possible"
    return "poor"
