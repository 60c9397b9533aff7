"""Tests for the identity and physical component scorers."""

import pytest

from watch_match.matching.schemas import PhysicalObservations, WatchIdentity
from watch_match.matching.scorers import (
    brand_score,
    model_score,
    physical_score,
    reference_number_score,
)
from watch_match.matching.similarity import calculate_string_score


# ===========================================================================
# identity scorers
# ===========================================================================

class TestIdentityScorers:
    def test_brand_exact_after_normalisation(self) -> None:
        a = WatchIdentity(brand="ROLEX ")
        b = WatchIdentity(brand="Rolex")
        assert brand_score(a, b) == 1.0

    def test_model_prefix_match(self) -> None:
        a = WatchIdentity(model_name="Submariner Date")
        b = WatchIdentity(model_name="Submariner")
        assert model_score(a, b) > 0.9

    def test_reference_number_uses_edit_distance(self) -> None:
        a = WatchIdentity(reference_number="126610LN")
        b = WatchIdentity(reference_number="126610LV")
        assert reference_number_score(a, b) == pytest.approx(0.875)

    def test_missing_reference_number(self) -> None:
        a = WatchIdentity(reference_number=None)
        b = WatchIdentity(reference_number="126610LN")
        assert reference_number_score(a, b) == 0.0

    def test_non_text_brand_scores_zero(self) -> None:
        a = WatchIdentity(brand=1905)
        b = WatchIdentity(brand="Rolex")
        assert brand_score(a, b) == 0.0


# ===========================================================================
# physical_score
# ===========================================================================

class TestPhysicalScore:
    def test_no_comparable_fields(self) -> None:
        assert physical_score(PhysicalObservations(), PhysicalObservations()) == 0.0

    def test_missing_on_one_side_is_not_penalised(self) -> None:
        a = PhysicalObservations(case_material="Oystersteel", dial_color="Black")
        b = PhysicalObservations(case_material="Oystersteel")
        assert physical_score(a, b) == 1.0

    def test_blank_string_counts_as_missing(self) -> None:
        a = PhysicalObservations(case_material="Oystersteel", dial_color="  ")
        b = PhysicalObservations(case_material="Oystersteel", dial_color="Blue")
        assert physical_score(a, b) == 1.0

    def test_full_credit_above_threshold(self) -> None:
        """Minor textual noise above 0.8 similarity earns full credit."""
        a = PhysicalObservations(case_material="Stainless Steel")
        b = PhysicalObservations(case_material="Stainless Steel 904L")
        assert calculate_string_score("Stainless Steel", "Stainless Steel 904L") > 0.8
        assert physical_score(a, b) == 1.0

    def test_partial_credit_below_threshold(self) -> None:
        a = PhysicalObservations(dial_color="black")
        b = PhysicalObservations(dial_color="blue")
        expected = calculate_string_score("black", "blue")
        assert expected < 0.8
        assert physical_score(a, b) == pytest.approx(expected)

    def test_average_over_compared_fields(self) -> None:
        a = PhysicalObservations(case_material="Oystersteel", dial_color="black")
        b = PhysicalObservations(case_material="Oystersteel", dial_color="blue")
        expected = (1.0 + calculate_string_score("black", "blue")) / 2
        assert physical_score(a, b) == pytest.approx(expected)

    def test_boolean_fields(self) -> None:
        a = PhysicalObservations(has_date=True, has_cyclops=True)
        b = PhysicalObservations(has_date=True, has_cyclops=False)
        assert physical_score(a, b, fields=("has_date", "has_cyclops")) == 0.5

    def test_false_flag_is_a_value(self) -> None:
        a = PhysicalObservations(has_date=False)
        b = PhysicalObservations(has_date=False)
        assert physical_score(a, b, fields=("has_date",)) == 1.0

    def test_non_text_value_earns_no_credit(self) -> None:
        a = PhysicalObservations(case_material=316)
        b = PhysicalObservations(case_material="Oystersteel")
        assert physical_score(a, b) == 0.0
