"""Field-by-field discrepancy analysis.

Compares a watch description against one reference record and explains,
field by field, where the two agree and where they do not.  Comparable
fields are declared once in ``FIELD_TABLE``, grouped by importance; each
entry carries a typed accessor that works on either side because both
models share the ``WatchAttributes`` sections.

The authenticity indicator lists get their own handling:

- Expected positive signs are looked up in the reported signs with a
  fuzzy existence check and scored by the fraction found.
- Red flags are checked one way only: a reference record is a presumed
  genuine exemplar, so any red flag reported against a reference that
  expects none is a critical discrepancy.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

import structlog

from watch_match.matching.schemas import (
    ReferenceWatch,
    Descriptor,
    WatchAttributes,
    WatchDescription,
)
from watch_match.matching.similarity import calculate_string_score

logger = structlog.get_logger()

FieldImportance = Literal["critical", "high", "medium", "low", "optional"]
DiscrepancySeverity = Literal[
    "exact_match", "minor_diff", "major_diff", "critical", "missing_data"
]

# Every value a discrepancy can carry.  Absent values are ``None``.
FieldValue = str | bool | list[str] | None

EXACT_MATCH_SIMILARITY = 0.95
SIGN_MATCH_SIMILARITY = 0.7


@dataclass(frozen=True)
class FieldConfig:
    """One comparable field.

    Attributes:
        path: Logical locator of the field, e.g. ``watch_identity.brand``.
        label: Human-readable field name.
        importance: How much a mismatch on this field matters.
        threshold: Minimum similarity (0-1) to count as a minor difference.
        get: Reads the field from a description or a reference record.
    """

    path: str
    label: str
    importance: FieldImportance
    threshold: float
    get: Callable[[WatchAttributes], Descriptor]


@dataclass(frozen=True)
class FieldDiscrepancy:
    """The outcome of comparing one field."""

    field_path: str
    field_label: str
    importance: FieldImportance
    severity: DiscrepancySeverity
    ai_value: FieldValue
    reference_value: FieldValue
    explanation: str
    similarity_score: float | None = None


@dataclass
class DiscrepancySummary:
    """Aggregate counts over a list of discrepancies."""

    total: int
    by_severity: dict[str, int] = field(default_factory=dict)
    by_importance: dict[str, int] = field(default_factory=dict)
    critical_issues: list[FieldDiscrepancy] = field(default_factory=list)


FIELD_TABLE: tuple[FieldConfig, ...] = (
    # critical
    FieldConfig(
        "watch_identity.brand", "Brand", "critical", 0.95,
        lambda w: w.watch_identity.brand,
    ),
    FieldConfig(
        "watch_identity.model_name", "Model", "critical", 0.90,
        lambda w: w.watch_identity.model_name,
    ),
    FieldConfig(
        "watch_identity.reference_number", "Reference Number", "critical", 0.85,
        lambda w: w.watch_identity.reference_number,
    ),
    # high
    FieldConfig(
        "physical_observations.case_material", "Case Material", "high", 0.85,
        lambda w: w.physical_observations.case_material,
    ),
    FieldConfig(
        "physical_observations.dial_color", "Dial Color", "high", 0.80,
        lambda w: w.physical_observations.dial_color,
    ),
    FieldConfig(
        "watch_identity.dial_variant", "Dial Variant", "high", 0.80,
        lambda w: w.watch_identity.dial_variant,
    ),
    # medium
    FieldConfig(
        "physical_observations.bezel_type", "Bezel Type", "medium", 0.75,
        lambda w: w.physical_observations.bezel_type,
    ),
    FieldConfig(
        "physical_observations.bracelet_type", "Bracelet", "medium", 0.70,
        lambda w: w.physical_observations.bracelet_type,
    ),
    FieldConfig(
        "physical_observations.crystal_material", "Crystal", "medium", 0.80,
        lambda w: w.physical_observations.crystal_material,
    ),
    FieldConfig(
        "physical_observations.case_shape", "Case Shape", "medium", 0.75,
        lambda w: w.physical_observations.case_shape,
    ),
    # low
    FieldConfig(
        "physical_observations.clasp_type", "Clasp Type", "low", 0.60,
        lambda w: w.physical_observations.clasp_type,
    ),
    FieldConfig(
        "physical_observations.crown_type", "Crown", "low", 0.60,
        lambda w: w.physical_observations.crown_type,
    ),
    FieldConfig(
        "physical_observations.case_finish", "Case Finish", "low", 0.65,
        lambda w: w.physical_observations.case_finish,
    ),
    # optional
    FieldConfig(
        "watch_identity.serial_number", "Serial Number", "optional", 0.90,
        lambda w: w.watch_identity.serial_number,
    ),
    FieldConfig(
        "watch_identity.estimated_year", "Year", "optional", 0.80,
        lambda w: w.watch_identity.estimated_year,
    ),
    FieldConfig(
        "condition_assessment.overall_grade", "Condition", "optional", 0.70,
        lambda w: w.condition_assessment.overall_grade,
    ),
)


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _string_explanation(similarity: float, ai_value: str, ref_value: str) -> str:
    """Describe a text comparison, banded by similarity."""
    if similarity >= EXACT_MATCH_SIMILARITY:
        return "Values match"
    if similarity >= 0.85:
        return f'Minor variation: "{ai_value}" vs "{ref_value}"'
    if similarity >= 0.70:
        return f'Moderate difference: "{ai_value}" vs "{ref_value}", verify carefully'
    return f'Significant mismatch: "{ai_value}" vs "{ref_value}", possible red flag'


def _string_severity(
    similarity: float, config: FieldConfig
) -> DiscrepancySeverity:
    if similarity >= EXACT_MATCH_SIMILARITY:
        return "exact_match"
    if similarity >= config.threshold:
        return "minor_diff"
    if config.importance == "critical":
        return "critical"
    return "major_diff"


def compare_field(
    config: FieldConfig, ai_value: Descriptor, ref_value: Descriptor
) -> FieldDiscrepancy | None:
    """Compare one field and describe the outcome.

    Returns ``None`` when there is nothing to report: both values are
    absent, or either value has a type other than text or flag (such
    values are skipped rather than raised, since library records are
    maintained by hand).
    """
    ai_empty = _is_empty(ai_value)
    ref_empty = _is_empty(ref_value)

    if ai_empty and ref_empty:
        return None

    for value in (ai_value, ref_value):
        if not _is_empty(value) and not isinstance(value, (str, bool)):
            logger.debug(
                "malformed_field_skipped",
                field_path=config.path,
                value_type=type(value).__name__,
            )
            return None

    if ai_empty or ref_empty:
        return FieldDiscrepancy(
            field_path=config.path,
            field_label=config.label,
            importance=config.importance,
            severity="missing_data",
            ai_value=None if ai_empty else ai_value,
            reference_value=None if ref_empty else ref_value,
            explanation=(
                "Reference record has no value for comparison"
                if ref_empty
                else "Value could not be extracted from the photos"
            ),
        )

    if isinstance(ai_value, bool) and isinstance(ref_value, bool):
        same = ai_value == ref_value
        return FieldDiscrepancy(
            field_path=config.path,
            field_label=config.label,
            importance=config.importance,
            severity="exact_match" if same else "major_diff",
            ai_value=ai_value,
            reference_value=ref_value,
            similarity_score=100.0 if same else 0.0,
            explanation=(
                "Values match"
                if same
                else f'Mismatch: photos show "{ai_value}" but reference shows "{ref_value}"'
            ),
        )

    if isinstance(ai_value, str) and isinstance(ref_value, str):
        similarity = calculate_string_score(ai_value, ref_value, "auto")
        return FieldDiscrepancy(
            field_path=config.path,
            field_label=config.label,
            importance=config.importance,
            severity=_string_severity(similarity, config),
            ai_value=ai_value,
            reference_value=ref_value,
            similarity_score=similarity * 100,
            explanation=_string_explanation(similarity, ai_value, ref_value),
        )

    # A flag on one side and text on the other.
    logger.debug("mismatched_field_types_skipped", field_path=config.path)
    return None


def _sign_severity(match_rate: float) -> DiscrepancySeverity:
    if match_rate >= 0.9:
        return "exact_match"
    if match_rate >= 0.7:
        return "minor_diff"
    if match_rate >= 0.5:
        return "major_diff"
    return "critical"


def compare_positive_signs(
    ai_signs: list[str], ref_signs: list[str]
) -> FieldDiscrepancy | None:
    """Score how many of the reference's expected signs were reported.

    Returns ``None`` if the reference declares no expected signs.
    """
    if not ref_signs:
        return None

    found = [
        ref_sign
        for ref_sign in ref_signs
        if any(
            calculate_string_score(ai_sign, ref_sign, "auto") > SIGN_MATCH_SIMILARITY
            for ai_sign in ai_signs
        )
    ]
    match_rate = len(found) / len(ref_signs)
    match_percent = match_rate * 100

    return FieldDiscrepancy(
        field_path="authenticity_indicators.positive_signs",
        field_label="Authenticity Markers",
        importance="high",
        severity=_sign_severity(match_rate),
        ai_value=list(ai_signs),
        reference_value=list(ref_signs),
        similarity_score=match_percent,
        explanation=(
            f"Found {len(found)} of {len(ref_signs)} expected authenticity "
            f"markers ({match_percent:.0f}% match)"
        ),
    )


def compare_red_flags(
    ai_flags: list[str], ref_flags: list[str]
) -> FieldDiscrepancy | None:
    """Flag red flags reported against a reference that expects none."""
    if not ai_flags or ref_flags:
        return None

    return FieldDiscrepancy(
        field_path="authenticity_indicators.red_flags",
        field_label="Red Flags",
        importance="critical",
        severity="critical",
        ai_value=list(ai_flags),
        reference_value=list(ref_flags),
        explanation=(
            f"{len(ai_flags)} red flag(s) reported that are not expected "
            "in genuine examples"
        ),
    )


def calculate_discrepancies(
    description: WatchDescription, reference: ReferenceWatch
) -> list[FieldDiscrepancy]:
    """Compare every declared field, then the authenticity indicator lists.

    The result is a flat list in declaration order (critical, high,
    medium, low, optional), followed by the positive-sign and red-flag
    entries.
    """
    discrepancies: list[FieldDiscrepancy] = []

    for config in FIELD_TABLE:
        discrepancy = compare_field(config, config.get(description), config.get(reference))
        if discrepancy is not None:
            discrepancies.append(discrepancy)

    ai_indicators = description.authenticity_indicators
    ref_indicators = reference.authenticity_indicators

    signs = compare_positive_signs(
        ai_indicators.positive_signs, ref_indicators.positive_signs
    )
    if signs is not None:
        discrepancies.append(signs)

    flags = compare_red_flags(ai_indicators.red_flags, ref_indicators.red_flags)
    if flags is not None:
        discrepancies.append(flags)

    return discrepancies


def summarize_discrepancies(
    discrepancies: list[FieldDiscrepancy],
) -> DiscrepancySummary:
    """Count discrepancies by severity and importance, and collect critical ones."""
    by_severity = Counter(d.severity for d in discrepancies)
    by_importance = Counter(d.importance for d in discrepancies)
    return DiscrepancySummary(
        total=len(discrepancies),
        by_severity=dict(by_severity),
        by_importance=dict(by_importance),
        critical_issues=[d for d in discrepancies if d.severity == "critical"],
    )
