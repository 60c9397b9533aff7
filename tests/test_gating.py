"""Tests for candidate gating."""

from watch_match.matching.config import SimilarityFloors
from watch_match.matching.gating import gate_candidates, meets_minimum_criteria

from helpers import make_description, make_reference


class TestMeetsMinimumCriteria:
    def test_both_above(self) -> None:
        assert meets_minimum_criteria(90.0, 80.0)

    def test_exactly_at_floors(self) -> None:
        assert meets_minimum_criteria(65.0, 50.0)

    def test_brand_below(self) -> None:
        assert not meets_minimum_criteria(64.9, 100.0)

    def test_model_below(self) -> None:
        """Brand similarity alone is not enough."""
        assert not meets_minimum_criteria(100.0, 49.9)

    def test_custom_floors(self) -> None:
        floors = SimilarityFloors(brand_min=0.9, model_min=0.9)
        assert not meets_minimum_criteria(89.0, 95.0, floors)
        assert meets_minimum_criteria(90.0, 90.0, floors)

    def test_monotonic(self) -> None:
        """Raising either score never turns an accept into a reject."""
        grid = [float(x) for x in range(0, 101, 5)]
        for brand in grid:
            for model in grid:
                if not meets_minimum_criteria(brand, model):
                    continue
                for higher in grid:
                    if higher >= brand:
                        assert meets_minimum_criteria(higher, model)
                    if higher >= model:
                        assert meets_minimum_criteria(brand, higher)


class TestGateCandidates:
    def test_keeps_same_brand_and_model(self) -> None:
        description = make_description(brand="Rolex", model_name="Submariner Date")
        candidates = [make_reference(id="sub", brand="Rolex", model_name="Submariner")]
        accepted, stats = gate_candidates(description, candidates)
        assert [c.id for c in accepted] == ["sub"]
        assert stats.retrieved == 1
        assert stats.accepted == 1
        assert stats.rejected == 0

    def test_rejects_other_brand(self) -> None:
        description = make_description(brand="Rolex", model_name="Submariner")
        candidates = [make_reference(id="omega", brand="Omega", model_name="Submariner")]
        accepted, stats = gate_candidates(description, candidates)
        assert accepted == []
        assert stats.rejected == 1

    def test_rejects_missing_model(self) -> None:
        description = make_description(brand="Rolex", model_name=None)
        candidates = [make_reference(brand="Rolex", model_name="Submariner")]
        accepted, _ = gate_candidates(description, candidates)
        assert accepted == []

    def test_preserves_input_order(self) -> None:
        description = make_description(brand="Rolex", model_name="Submariner")
        candidates = [
            make_reference(id="a", model_name="Submariner Date"),
            make_reference(id="b", brand="Omega", model_name="Seamaster"),
            make_reference(id="c", model_name="Submariner"),
        ]
        accepted, stats = gate_candidates(description, candidates)
        assert [c.id for c in accepted] == ["a", "c"]
        assert (stats.retrieved, stats.accepted, stats.rejected) == (3, 2, 1)

    def test_empty_candidates(self) -> None:
        accepted, stats = gate_candidates(make_description(), [])
        assert accepted == []
        assert stats.retrieved == 0
