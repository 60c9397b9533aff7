"""Analysis comparison model -- the stored best match for one analysis."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from watch_match.models.base import Base


class AnalysisComparison(Base):
    """Records how a photographed watch compared to its best reference match.

    Keeps the raw description, the overall and component scores, and the
    full discrepancy list.  ``user_confirmed_match`` and ``user_notes`` are
    filled in later by a reviewer.
    """

    __tablename__ = "analysis_comparisons"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
    )
    reference_watch_id: Mapped[str | None] = mapped_column(
        sa.String(36), sa.ForeignKey("reference_watches.id"), nullable=True
    )

    ai_analysis: Mapped[dict] = mapped_column(sa.JSON)

    # Scores (0-100)
    match_score: Mapped[float] = mapped_column(sa.Float)
    brand_match_score: Mapped[float] = mapped_column(sa.Float)
    model_match_score: Mapped[float] = mapped_column(sa.Float)
    reference_match_score: Mapped[float] = mapped_column(sa.Float)
    physical_match_score: Mapped[float] = mapped_column(sa.Float)

    discrepancies: Mapped[list | None] = mapped_column(sa.JSON, nullable=True)
    discrepancy_summary: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    user_confirmed_match: Mapped[bool | None] = mapped_column(sa.Boolean, nullable=True)
    user_notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    session_id: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    __table_args__ = (
        sa.Index("ix_analysis_comparisons_reference", "reference_watch_id"),
        sa.Index("ix_analysis_comparisons_session", "session_id"),
    )
