"""Builders for watch descriptions and reference records used across tests."""

from watch_match.matching.schemas import ReferenceWatch, WatchDescription


def make_description(
    brand: str | None = "Rolex",
    model_name: str | None = "Submariner Date",
    reference_number: str | None = None,
    physical: dict | None = None,
    positive_signs: list[str] | None = None,
    red_flags: list[str] | None = None,
    **identity,
) -> WatchDescription:
    """Create a watch description with only the given fields populated."""
    return WatchDescription.model_validate(
        {
            "watch_identity": {
                "brand": brand,
                "model_name": model_name,
                "reference_number": reference_number,
                **identity,
            },
            "physical_observations": physical or {},
            "authenticity_indicators": {
                "positive_signs": positive_signs or [],
                "red_flags": red_flags or [],
            },
        }
    )


def make_reference(
    id: str = "ref-1",
    brand: str | None = "Rolex",
    model_name: str | None = "Submariner",
    reference_number: str | None = None,
    physical: dict | None = None,
    positive_signs: list[str] | None = None,
    red_flags: list[str] | None = None,
    verification_status: str = "verified",
    **identity,
) -> ReferenceWatch:
    """Create a reference record with only the given fields populated."""
    return ReferenceWatch.model_validate(
        {
            "id": id,
            "verification_status": verification_status,
            "watch_identity": {
                "brand": brand,
                "model_name": model_name,
                "reference_number": reference_number,
                **identity,
            },
            "physical_observations": physical or {},
            "authenticity_indicators": {
                "positive_signs": positive_signs or [],
                "red_flags": red_flags or [],
            },
        }
    )
