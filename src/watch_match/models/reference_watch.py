"""Reference watch model -- a curated library record."""

from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from watch_match.models.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ReferenceWatchRecord(Base):
    """A verified (or pending) reference watch in the library.

    Brand, model and reference number are stored as top-level columns for
    searching and uniqueness; the full identity, physical, condition and
    authenticity sections are kept as JSON exactly as entered.
    """

    __tablename__ = "reference_watches"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime,
        server_default=sa.text("CURRENT_TIMESTAMP"),
        onupdate=sa.func.now(),
    )

    # Identity
    brand: Mapped[str] = mapped_column(sa.String)
    model_name: Mapped[str] = mapped_column(sa.String)
    collection_family: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    reference_number: Mapped[str] = mapped_column(sa.String)
    watch_identity: Mapped[dict] = mapped_column(sa.JSON)

    # Physical
    case_material: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    dial_color: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    bracelet_type: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    physical_observations: Mapped[dict] = mapped_column(sa.JSON)

    condition_baseline: Mapped[dict | None] = mapped_column(sa.JSON, nullable=True)
    authenticity_indicators: Mapped[dict] = mapped_column(sa.JSON)

    # Curation metadata
    verification_status: Mapped[str] = mapped_column(sa.String, default="pending")
    verified_by: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(sa.DateTime, nullable=True)
    source: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    __table_args__ = (
        sa.UniqueConstraint(
            "brand", "model_name", "reference_number", name="uq_reference_per_brand"
        ),
        sa.CheckConstraint(
            "verification_status IN ('pending', 'verified', 'needs_review', 'deprecated')",
            name="valid_verification_status",
        ),
        sa.Index("ix_reference_watches_status", "verification_status"),
    )
