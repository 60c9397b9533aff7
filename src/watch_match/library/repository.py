"""Reference library access.

``ReferenceLibrary`` is the storage collaborator the orchestrator talks
to: a coarse brand search returning candidate references, and a sink for
best-match comparison records.  ``SqlReferenceLibrary`` implements it on
the async SQLAlchemy models.

The coarse search deliberately uses a different, cheaper metric
(RapidFuzz ``fuzz.ratio``) than the engine's Jaro-Winkler scores; the
engine re-gates every candidate it receives.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol

import structlog
from pydantic import ValidationError
from rapidfuzz import fuzz
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from watch_match.exceptions import CandidateRetrievalError
from watch_match.matching.pipeline import ComparisonRecord
from watch_match.matching.schemas import ReferenceWatch
from watch_match.models.analysis_comparison import AnalysisComparison
from watch_match.models.reference_watch import ReferenceWatchRecord

logger = structlog.get_logger()


class ReferenceLibrary(Protocol):
    """Storage collaborator used by the match orchestrator."""

    async def search_by_brand(
        self, brand: str, similarity_threshold: float, limit: int
    ) -> list[ReferenceWatch]:
        """Return verified references whose brand is roughly similar."""
        ...

    async def save_comparison(self, record: ComparisonRecord) -> None:
        """Persist a best-match comparison record."""
        ...


def brand_similarity(a: str, b: str) -> float:
    """Approximate brand similarity in [0, 1] used for the coarse search."""
    return fuzz.ratio(a.strip().casefold(), b.strip().casefold()) / 100.0


def reference_from_record(record: ReferenceWatchRecord) -> ReferenceWatch:
    """Convert an ORM record into a ``ReferenceWatch``.

    The top-level brand/model/reference columns take precedence over any
    copies inside the ``watch_identity`` JSON.
    """
    raw_identity = record.watch_identity
    identity = dict(raw_identity) if isinstance(raw_identity, dict) else {}
    identity["brand"] = record.brand
    identity["model_name"] = record.model_name
    identity["reference_number"] = record.reference_number
    if record.collection_family is not None:
        identity["collection_family"] = record.collection_family

    return ReferenceWatch.model_validate(
        {
            "id": record.id,
            "verification_status": record.verification_status,
            "watch_identity": identity,
            "physical_observations": record.physical_observations or {},
            "condition_assessment": record.condition_baseline or {},
            "authenticity_indicators": record.authenticity_indicators or {},
        }
    )


def record_from_reference(reference: ReferenceWatch) -> ReferenceWatchRecord:
    """Build an ORM record from a ``ReferenceWatch``."""
    identity = reference.watch_identity
    physical = reference.physical_observations

    def text(value: object) -> str | None:
        return value if isinstance(value, str) else None

    return ReferenceWatchRecord(
        id=reference.id,
        brand=text(identity.brand) or "",
        model_name=text(identity.model_name) or "",
        collection_family=text(identity.collection_family),
        reference_number=text(identity.reference_number) or "",
        watch_identity=identity.model_dump(mode="json"),
        case_material=text(physical.case_material),
        dial_color=text(physical.dial_color),
        bracelet_type=text(physical.bracelet_type),
        physical_observations=physical.model_dump(mode="json"),
        condition_baseline=reference.condition_assessment.model_dump(mode="json"),
        authenticity_indicators=reference.authenticity_indicators.model_dump(mode="json"),
        verification_status=reference.verification_status,
    )


async def add_references(
    session: AsyncSession, references: list[ReferenceWatch]
) -> int:
    """Add reference records to the session.  Caller commits.

    Returns:
        Number of records added.
    """
    session.add_all([record_from_reference(r) for r in references])
    await session.flush()
    return len(references)


class SqlReferenceLibrary:
    """``ReferenceLibrary`` backed by the async SQLAlchemy models."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def search_by_brand(
        self, brand: str, similarity_threshold: float, limit: int
    ) -> list[ReferenceWatch]:
        """Coarse search over verified references by approximate brand.

        Results are ordered by brand similarity, best first, and capped
        at ``limit``.  Records whose stored sections cannot be loaded are
        logged and skipped.

        Brand similarity is computed in Python over every verified record,
        so the cost grows with the size of the library.

        Raises:
            CandidateRetrievalError: If the database query fails.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ReferenceWatchRecord).where(
                        ReferenceWatchRecord.verification_status == "verified"
                    )
                )
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise CandidateRetrievalError(f"Reference search failed: {e}") from e

        scored = [
            (brand_similarity(brand, record.brand), record) for record in records
        ]
        scored = [(sim, record) for sim, record in scored if sim >= similarity_threshold]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        candidates: list[ReferenceWatch] = []
        for _, record in scored:
            if len(candidates) >= limit:
                break
            try:
                candidates.append(reference_from_record(record))
            except (ValidationError, TypeError) as e:
                logger.warning(
                    "reference_record_skipped", reference_id=record.id, error=str(e)
                )

        logger.debug(
            "reference_search_complete",
            brand=brand,
            verified_records=len(records),
            candidates=len(candidates),
        )
        return candidates

    async def save_comparison(self, record: ComparisonRecord) -> None:
        """Insert one ``AnalysisComparison`` row in its own transaction."""
        async with self._session_factory() as session, session.begin():
            session.add(AnalysisComparison(**dataclasses.asdict(record)))
