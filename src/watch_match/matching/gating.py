"""Candidate gating.

The reference library's coarse search only filters on approximate brand
similarity, using its own metric.  Gating re-checks every candidate with
the engine's canonical Jaro-Winkler scores and requires BOTH brand and
model to clear their floors: brand similarity alone lets other models of
the same brand through as false positives.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from watch_match.matching.config import SimilarityFloors
from watch_match.matching.schemas import ReferenceWatch, WatchDescription
from watch_match.matching.scorers import brand_score, model_score

logger = structlog.get_logger()


@dataclass
class GatingStats:
    """Counts from one gating pass.

    Attributes:
        retrieved: Candidates handed in by the reference library.
        accepted: Candidates that cleared both similarity floors.
        rejected: Candidates dropped by gating.
    """

    retrieved: int
    accepted: int
    rejected: int


def meets_minimum_criteria(
    brand: float, model: float, floors: SimilarityFloors | None = None
) -> bool:
    """Check brand and model scores (0-100) against the configured floors."""
    if floors is None:
        floors = SimilarityFloors()
    return brand >= floors.brand_min * 100 and model >= floors.model_min * 100


def gate_candidates(
    description: WatchDescription,
    candidates: list[ReferenceWatch],
    floors: SimilarityFloors | None = None,
) -> tuple[list[ReferenceWatch], GatingStats]:
    """Drop candidates whose brand or model is too dissimilar.

    Args:
        description: The watch description being matched.
        candidates: Reference records from the coarse brand search.
        floors: Minimum similarity floors.

    Returns:
        A tuple of (accepted candidates in input order, gating statistics).
    """
    if floors is None:
        floors = SimilarityFloors()

    accepted: list[ReferenceWatch] = []
    identity = description.watch_identity

    for candidate in candidates:
        brand = brand_score(identity, candidate.watch_identity) * 100
        model = model_score(identity, candidate.watch_identity) * 100
        if meets_minimum_criteria(brand, model, floors):
            accepted.append(candidate)
        else:
            logger.debug(
                "candidate_gated",
                reference_id=candidate.id,
                brand=candidate.brand,
                model=candidate.model_name,
                brand_score=round(brand, 1),
                model_score=round(model, 1),
            )

    return accepted, GatingStats(
        retrieved=len(candidates),
        accepted=len(accepted),
        rejected=len(candidates) - len(accepted),
    )
