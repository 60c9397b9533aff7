"""Match orchestrator bridging the reference library and the pure pipeline.

1. Retrieve coarse candidates from the library by approximate brand.
2. Gate, score, analyse and rank them (pure function).
3. Store a comparison record for the best match (best effort).

Only steps 1 and 3 touch storage.  A failed retrieval is raised to the
caller; a failed comparison write is logged and the ranked matches are
still returned.
"""

from __future__ import annotations

import structlog

from watch_match.exceptions import InvalidDescriptionError
from watch_match.library.repository import ReferenceLibrary
from watch_match.matching.config import MatchingConfig
from watch_match.matching.pipeline import (
    CancelSignal,
    MatchOutcome,
    build_comparison_record,
    score_candidates,
)
from watch_match.matching.schemas import WatchDescription

logger = structlog.get_logger()


def require_identity(description: WatchDescription) -> str:
    """Return the description's brand, or raise if there is nothing to search by.

    Raises:
        InvalidDescriptionError: If the brand is missing, blank or not text.
    """
    brand = description.watch_identity.brand
    if not isinstance(brand, str) or not brand.strip():
        raise InvalidDescriptionError("Watch description has no brand to match on")
    return brand


async def find_matches(
    description: WatchDescription,
    library: ReferenceLibrary,
    config: MatchingConfig | None = None,
    session_id: str | None = None,
    cancel: CancelSignal | None = None,
) -> MatchOutcome:
    """Find the reference watches that best match a description.

    Args:
        description: Structured description from the vision analysis.
        library: Reference library used for retrieval and persistence.
        config: Matching configuration.  Defaults to ``MatchingConfig()``.
        session_id: Optional client session id stored with the comparison.
        cancel: Optional signal checked between candidates.

    Returns:
        The ranked ``MatchOutcome``.

    Raises:
        InvalidDescriptionError: If the description has no brand.
        CandidateRetrievalError: If the library search fails.
        MatchingCancelled: If ``cancel`` is set during scoring.
    """
    if config is None:
        config = MatchingConfig()

    brand = require_identity(description)
    log = logger.bind(
        brand=brand,
        model=description.watch_identity.model_name,
        session_id=session_id,
    )

    candidates = await library.search_by_brand(
        brand,
        similarity_threshold=config.retrieval.brand_similarity_threshold,
        limit=config.retrieval.candidate_limit,
    )
    log.info("candidates_retrieved", count=len(candidates))

    outcome = score_candidates(description, candidates, config, cancel=cancel)

    log.info(
        "matching_complete",
        retrieved=outcome.total_candidates_retrieved,
        accepted=outcome.total_candidates_accepted,
        returned=len(outcome.matches),
        top=[
            {
                "reference_id": m.reference_watch.id,
                "score": round(m.match_score, 1),
                "tier": m.confidence_tier,
            }
            for m in outcome.matches
        ],
    )

    best = outcome.best_match
    if best is None:
        return outcome

    record = build_comparison_record(description, best, session_id)
    try:
        await library.save_comparison(record)
        outcome.comparison_recorded = True
    except Exception as e:
        log.error(
            "comparison_persist_failed",
            reference_id=record.reference_watch_id,
            error=str(e),
            exc_info=True,
        )

    return outcome
