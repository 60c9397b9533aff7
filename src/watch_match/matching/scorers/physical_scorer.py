"""Physical descriptor scorer.

Averages per-field credit over the physical descriptors that are
present on both sides.  A field missing on either side is left out of
the average entirely, so an unobservable detail is never penalised.
"""

from __future__ import annotations

from watch_match.matching.schemas import PhysicalObservations
from watch_match.matching.similarity import calculate_string_score

PHYSICAL_FIELDS: tuple[str, ...] = (
    "case_material",
    "dial_color",
    "bezel_type",
    "bracelet_type",
    "crystal_material",
    "case_shape",
    "case_finish",
    "hands_style",
    "indices_type",
)

# Above this similarity a text field earns full credit.
FULL_CREDIT_SIMILARITY = 0.8


def _is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _field_credit(value_a: object, value_b: object) -> float:
    """Credit in [0, 1] for one field present on both sides.

    Values of mismatched or non-text, non-flag types earn no credit.
    """
    if isinstance(value_a, bool) and isinstance(value_b, bool):
        return 1.0 if value_a == value_b else 0.0
    if isinstance(value_a, str) and isinstance(value_b, str):
        similarity = calculate_string_score(value_a, value_b, "auto")
        return 1.0 if similarity > FULL_CREDIT_SIMILARITY else similarity
    return 0.0


def physical_score(
    observed: PhysicalObservations,
    reference: PhysicalObservations,
    fields: tuple[str, ...] = PHYSICAL_FIELDS,
) -> float:
    """Compute physical similarity between two sets of observations.

    Returns a float in [0, 1]:
    - 0.0 if no field is populated on both sides
    - mean per-field credit over the compared fields otherwise
    """
    total = 0.0
    compared = 0

    for field in fields:
        value_a = getattr(observed, field)
        value_b = getattr(reference, field)
        if not _is_present(value_a) or not _is_present(value_b):
            continue
        compared += 1
        total += _field_credit(value_a, value_b)

    if compared == 0:
        return 0.0
    return total / compared
