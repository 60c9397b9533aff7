"""Reference matching endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from watch_match.api.deps import get_library, get_matching_config
from watch_match.api.schemas import MatchRequest, MatchResponse, MatchSchema
from watch_match.exceptions import CandidateRetrievalError, InvalidDescriptionError
from watch_match.library.repository import ReferenceLibrary
from watch_match.matching.config import MatchingConfig
from watch_match.service.orchestrator import find_matches, require_identity

router = APIRouter(prefix="/api/references", tags=["references"])


@router.post("/match", response_model=MatchResponse)
async def match_references(
    body: MatchRequest,
    library: ReferenceLibrary = Depends(get_library),
    config: MatchingConfig = Depends(get_matching_config),
) -> MatchResponse:
    """Find the library references that best match a watch description."""
    try:
        require_identity(body.analysis)
    except InvalidDescriptionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        outcome = await find_matches(
            body.analysis, library, config, session_id=body.session_id
        )
    except CandidateRetrievalError as e:
        raise HTTPException(status_code=502, detail="Failed to search references") from e

    message = None
    if outcome.total_candidates_retrieved == 0:
        message = "No matching references found in library"
    elif not outcome.matches:
        message = "No matching references found in library (after filtering)"

    return MatchResponse(
        matches=[MatchSchema.model_validate(m) for m in outcome.matches],
        total_found=len(outcome.matches),
        total_candidates_retrieved=outcome.total_candidates_retrieved,
        total_candidates_accepted=outcome.total_candidates_accepted,
        message=message,
    )
