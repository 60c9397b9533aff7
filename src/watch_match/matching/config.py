"""Matching engine configuration with sensible defaults.

All parameters can be overridden via ``watch_match/config/matching.yaml``.
If the file does not exist, defaults are used and a warning is logged.
Every section is frozen: a loaded config is a value passed explicitly
to each call, never mutated in place.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoringWeights(BaseModel):
    """Relative weights for the four match components."""

    model_config = ConfigDict(frozen=True)

    brand: float = Field(default=0.40, ge=0.0, le=1.0)
    model: float = Field(default=0.35, ge=0.0, le=1.0)
    reference: float = Field(default=0.15, ge=0.0, le=1.0)
    physical: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def warn_if_weights_dont_sum(self) -> "ScoringWeights":
        """Log a warning if weights do not sum to approximately 1.0."""
        total = self.brand + self.model + self.reference + self.physical
        if abs(total - 1.0) > 0.01:
            structlog.get_logger().warning(
                "scoring_weights_sum_mismatch",
                total=round(total, 4),
                expected=1.0,
            )
        return self


class ConfidenceThresholds(BaseModel):
    """Match-score cut-offs (0-100) for the confidence tiers.

    ``poor`` is informational: anything below ``possible`` is poor.
    """

    model_config = ConfigDict(frozen=True)

    excellent: float = 85.0
    good: float = 70.0
    possible: float = 55.0
    poor: float = 40.0


class SimilarityFloors(BaseModel):
    """Minimum per-field similarity (0-1) a candidate must reach."""

    model_config = ConfigDict(frozen=True)

    brand_min: float = Field(default=0.65, ge=0.0, le=1.0)
    model_min: float = Field(default=0.50, ge=0.0, le=1.0)
    reference_min: float = Field(default=0.70, ge=0.0, le=1.0)


class RetrievalConfig(BaseModel):
    """Parameters handed to the reference library's coarse brand search."""

    model_config = ConfigDict(frozen=True)

    brand_similarity_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    candidate_limit: int = Field(default=50, ge=1)


class MatchingConfig(BaseModel):
    """Top-level matching configuration combining all sub-configs."""

    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = ScoringWeights()
    thresholds: ConfidenceThresholds = ConfidenceThresholds()
    similarity: SimilarityFloors = SimilarityFloors()
    retrieval: RetrievalConfig = RetrievalConfig()
    max_results: int = Field(default=5, ge=1)


def load_matching_config(path: Path) -> MatchingConfig:
    """Load matching configuration from a YAML file.

    If the file does not exist, returns a ``MatchingConfig`` with all
    default values and logs a warning.  Partial overrides are supported --
    only the keys present in the YAML file will override defaults.
    """
    if not path.exists():
        structlog.get_logger().warning(
            "matching_config_missing", path=str(path), using="defaults"
        )
        return MatchingConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return MatchingConfig(**data)
