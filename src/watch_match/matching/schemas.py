"""Pydantic models for watch descriptions and reference library records.

A ``WatchDescription`` is produced per request by the vision-analysis
step; a ``ReferenceWatch`` is a curated library record.  Both share the
identity / physical / condition sections through ``WatchAttributes`` so
that field accessors can be written once for either side.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Library records are hand-maintained, so descriptor values are kept as
# entered rather than coerced.  Comparison code skips non-text values.
Descriptor = Any

VerificationStatus = Literal["pending", "verified", "needs_review", "deprecated"]


def text_list(value: Any) -> list[str]:
    """Coerce a loosely typed list field to a list of strings.

    ``None`` becomes ``[]``, a lone string becomes a one-item list, and
    non-string items are dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


class WatchIdentity(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    brand: Descriptor = None
    model_name: Descriptor = None
    collection_family: Descriptor = None
    reference_number: Descriptor = None
    dial_variant: Descriptor = None
    bezel_variant: Descriptor = None
    bracelet_variant: Descriptor = None
    limited_edition: Descriptor = None
    serial_number: Descriptor = None
    estimated_year: Descriptor = None


class PhysicalObservations(BaseModel):
    case_material: Descriptor = None
    case_finish: Descriptor = None
    case_diameter_estimate: Descriptor = None
    case_shape: Descriptor = None
    bezel_type: Descriptor = None
    bezel_material: Descriptor = None
    bezel_insert_material: Descriptor = None
    crystal_material: Descriptor = None
    has_cyclops: Descriptor = None
    crown_type: Descriptor = None
    has_crown_guards: Descriptor = None
    dial_color: Descriptor = None
    dial_finish: Descriptor = None
    indices_type: Descriptor = None
    hands_style: Descriptor = None
    has_date: Descriptor = None
    date_position: Descriptor = None
    bracelet_type: Descriptor = None
    bracelet_material: Descriptor = None
    clasp_type: Descriptor = None


class ConditionAssessment(BaseModel):
    overall_grade: Descriptor = None
    crystal_condition: Descriptor = None
    case_condition: Descriptor = None
    bezel_condition: Descriptor = None
    dial_condition: Descriptor = None
    bracelet_condition: Descriptor = None
    visible_damage: list[str] = Field(default_factory=list)

    coerce_visible_damage = field_validator("visible_damage", mode="before")(text_list)


class AuthenticityIndicators(BaseModel):
    """Signs observed (or expected) when judging authenticity."""

    positive_signs: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    confidence_level: Descriptor = None
    reasoning: Descriptor = None

    coerce_sign_lists = field_validator(
        "positive_signs", "concerns", "red_flags", mode="before"
    )(text_list)


class WatchAttributes(BaseModel):
    """Sections shared by descriptions and reference records."""

    watch_identity: WatchIdentity = Field(default_factory=WatchIdentity)
    physical_observations: PhysicalObservations = Field(
        default_factory=PhysicalObservations
    )
    condition_assessment: ConditionAssessment = Field(
        default_factory=ConditionAssessment
    )
    authenticity_indicators: AuthenticityIndicators = Field(
        default_factory=AuthenticityIndicators
    )

    @field_validator(
        "watch_identity",
        "physical_observations",
        "condition_assessment",
        "authenticity_indicators",
        mode="before",
    )
    @classmethod
    def missing_section_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class WatchDescription(WatchAttributes):
    """Structured description of a photographed watch."""

    additional_photos_needed: list[str] = Field(default_factory=list)
    preliminary_assessment: Descriptor = None

    coerce_photo_list = field_validator("additional_photos_needed", mode="before")(
        text_list
    )


class ReferenceWatch(WatchAttributes):
    """A curated reference record from the watch library."""

    id: str
    verification_status: VerificationStatus = "pending"

    @property
    def brand(self) -> Descriptor:
        return self.watch_identity.brand

    @property
    def model_name(self) -> Descriptor:
        return self.watch_identity.model_name

    @property
    def reference_number(self) -> Descriptor:
        return self.watch_identity.reference_number
