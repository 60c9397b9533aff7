"""Pydantic request/response schemas for the matching API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from watch_match.matching.schemas import ReferenceWatch, WatchDescription


class MatchRequest(BaseModel):
    analysis: WatchDescription
    session_id: str | None = None


class ComponentScoresSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    brand: float
    model: float
    reference: float
    physical: float


class FieldDiscrepancySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field_path: str
    field_label: str
    importance: str
    severity: str
    ai_value: str | bool | list[str] | None = None
    reference_value: str | bool | list[str] | None = None
    similarity_score: float | None = None
    explanation: str


class MatchSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reference_watch: ReferenceWatch
    match_score: float
    component_scores: ComponentScoresSchema
    confidence_tier: str
    discrepancies: list[FieldDiscrepancySchema]


class MatchResponse(BaseModel):
    success: bool = True
    matches: list[MatchSchema]
    total_found: int
    total_candidates_retrieved: int
    total_candidates_accepted: int
    message: str | None = None
