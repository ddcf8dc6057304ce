"""
CandidateTimelineEvent model.

Append-only history of what happened to a candidate (stage changes, notes).
"""

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.utils.time import utc_now

if TYPE_CHECKING:
    from app.models.candidate import Candidate


class CandidateTimelineEvent(Base):
    """Timeline entry for a candidate."""

    __tablename__ = "candidate_timeline_event"
    __table_args__ = (
        Index("ix_timeline_candidate_ts", "candidate_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )

    candidate_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("candidate.id"),
        nullable=False,
    )

    # stage_change | note
    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    from_stage: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    to_stage: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    candidate: Mapped["Candidate"] = relationship(
        "Candidate",
        back_populates="timeline_events",
    )
