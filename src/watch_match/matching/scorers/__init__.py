"""Match component scorers -- pure functions over watch models."""

from watch_match.matching.scorers.identity_scorer import (
    brand_score,
    model_score,
    reference_number_score,
)
from watch_match.matching.scorers.physical_scorer import PHYSICAL_FIELDS, physical_score

__all__ = [
    "PHYSICAL_FIELDS",
    "brand_score",
    "model_score",
    "physical_score",
    "reference_number_score",
]
