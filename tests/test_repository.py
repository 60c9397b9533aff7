"""Tests for the SQL-backed reference library."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from watch_match.exceptions import CandidateRetrievalError
from watch_match.library.repository import (
    SqlReferenceLibrary,
    add_references,
    brand_similarity,
    reference_from_record,
)
from watch_match.matching.config import MatchingConfig
from watch_match.matching.pipeline import build_comparison_record, score_candidates
from watch_match.models.analysis_comparison import AnalysisComparison
from watch_match.models.reference_watch import ReferenceWatchRecord

from helpers import make_description, make_reference


async def _seed(session_factory, references):
    async with session_factory() as session, session.begin():
        await add_references(session, references)


def test_brand_similarity_ignores_case():
    assert brand_similarity("ROLEX ", "rolex") == 1.0
    assert brand_similarity("Rolex", "Omega") < 0.75


def test_record_columns_override_identity_json():
    record = ReferenceWatchRecord(
        id="abc",
        brand="Rolex",
        model_name="Submariner",
        collection_family=None,
        reference_number="126610LN",
        watch_identity={"brand": "Rollex", "model_name": "Sub", "dial_variant": "Black"},
        physical_observations={"case_material": "Oystersteel"},
        condition_baseline=None,
        authenticity_indicators={"positive_signs": ["crown at 6"]},
        verification_status="verified",
    )

    reference = reference_from_record(record)

    assert reference.id == "abc"
    assert reference.brand == "Rolex"
    assert reference.model_name == "Submariner"
    assert reference.reference_number == "126610LN"
    assert reference.watch_identity.dial_variant == "Black"
    assert reference.physical_observations.case_material == "Oystersteel"
    assert reference.authenticity_indicators.positive_signs == ["crown at 6"]


class TestSearchByBrand:
    async def test_returns_verified_only(self, library, test_session_factory):
        await _seed(
            test_session_factory,
            [
                make_reference(id="verified", model_name="Submariner"),
                make_reference(id="pending", model_name="GMT-Master II", verification_status="pending"),
                make_reference(id="deprecated", model_name="Explorer", verification_status="deprecated"),
            ],
        )

        results = await library.search_by_brand("Rolex", similarity_threshold=0.75, limit=50)

        assert [r.id for r in results] == ["verified"]
        assert results[0].verification_status == "verified"

    async def test_threshold_filters_brands(self, library, test_session_factory):
        await _seed(
            test_session_factory,
            [
                make_reference(id="rolex", brand="Rolex"),
                make_reference(id="omega", brand="Omega", model_name="Seamaster"),
            ],
        )

        results = await library.search_by_brand("rolex", similarity_threshold=0.75, limit=50)

        assert [r.id for r in results] == ["rolex"]

    async def test_ordered_by_similarity_and_limited(self, library, test_session_factory):
        await _seed(
            test_session_factory,
            [
                make_reference(id="close", brand="Rolexx", model_name="Datejust"),
                make_reference(id="exact", brand="Rolex", model_name="Day-Date"),
                make_reference(id="exact-2", brand="Rolex", model_name="Daytona"),
            ],
        )

        results = await library.search_by_brand("Rolex", similarity_threshold=0.75, limit=2)

        assert len(results) == 2
        assert {r.id for r in results} == {"exact", "exact-2"}

    async def test_empty_library(self, library):
        assert await library.search_by_brand("Rolex", 0.75, 50) == []

    async def test_query_failure_raises(self):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        try:
            library = SqlReferenceLibrary(async_sessionmaker(engine))
            with pytest.raises(CandidateRetrievalError):
                await library.search_by_brand("Rolex", 0.75, 50)
        finally:
            await engine.dispose()


class TestSaveComparison:
    async def test_inserts_comparison_row(self, library, test_session_factory):
        reference = make_reference(id="ref-1")
        await _seed(test_session_factory, [reference])
        description = make_description(red_flags=["mismatched font"])
        outcome = score_candidates(description, [reference], MatchingConfig())
        record = build_comparison_record(description, outcome.best_match, "session-1")

        await library.save_comparison(record)

        async with test_session_factory() as session:
            rows = (await session.execute(select(AnalysisComparison))).scalars().all()
        assert len(rows) == 1
        row = rows[0]
        assert row.reference_watch_id == "ref-1"
        assert row.session_id == "session-1"
        assert row.match_score == pytest.approx(record.match_score)
        assert row.physical_match_score == 0.0
        assert row.ai_analysis["authenticity_indicators"]["red_flags"] == ["mismatched font"]
        assert row.discrepancy_summary == "3 field(s) compared, 1 critical issue(s)"
        assert row.user_confirmed_match is None


def _raw_record(id, model_name, physical=None, authenticity=None):
    return ReferenceWatchRecord(
        id=id,
        brand="Rolex",
        model_name=model_name,
        reference_number="",
        watch_identity={"brand": "Rolex", "model_name": model_name},
        physical_observations=physical if physical is not None else {},
        authenticity_indicators=authenticity if authenticity is not None else {},
        verification_status="verified",
    )


class TestHandMaintainedRecords:
    async def test_loosely_typed_records_load(self, library, test_session_factory):
        async with test_session_factory() as session, session.begin():
            session.add_all(
                [
                    _raw_record(
                        "null-lists",
                        "Submariner",
                        authenticity={"positive_signs": None, "red_flags": None},
                    ),
                    _raw_record(
                        "list-material",
                        "Submariner Date",
                        physical={"case_material": ["Oystersteel", "Gold"]},
                    ),
                ]
            )

        results = await library.search_by_brand("Rolex", 0.75, 50)

        by_id = {r.id: r for r in results}
        assert set(by_id) == {"null-lists", "list-material"}
        assert by_id["null-lists"].authenticity_indicators.positive_signs == []
        assert by_id["list-material"].physical_observations.case_material == [
            "Oystersteel",
            "Gold",
        ]

    async def test_unloadable_record_is_skipped(self, library, test_session_factory):
        async with test_session_factory() as session, session.begin():
            session.add_all(
                [
                    _raw_record("good", "Submariner"),
                    _raw_record("broken", "Daytona", physical=["not", "a", "section"]),
                ]
            )

        results = await library.search_by_brand("Rolex", 0.75, 50)

        assert [r.id for r in results] == ["good"]
