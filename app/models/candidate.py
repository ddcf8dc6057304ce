"""
Candidate model.

Represents a job candidate being tracked in the ATS pipeline.
"""

import uuid
from datetime import datetime
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.utils.time import utc_now

if TYPE_CHECKING:
    from app.models.candidate_timeline_event import CandidateTimelineEvent


def new_candidate_id() -> str:
    return f"candidate-{uuid.uuid4().hex[:12]}"


class Candidate(Base):
    """
    Candidate table - a person applying to a job.

    ``stage`` holds one pipeline stage value; candidates carry no positional
    relationship to each other.
    """

    __tablename__ = "candidate"
    __table_args__ = (
        Index("ix_candidate_stage", "stage"),
        Index("ix_candidate_job_id", "job_id"),
        Index("ix_candidate_applied_at", "applied_at"),
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=new_candidate_id,
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # applied | screen | tech | offer | hired | rejected
    stage: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="applied",
    )

    job_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("job.id"),
        nullable=True,
    )

    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    resume: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Relationships
    timeline_events: Mapped[List["CandidateTimelineEvent"]] = relationship(
        "CandidateTimelineEvent",
        back_populates="candidate",
        order_by="CandidateTimelineEvent.timestamp",
        lazy="raise",
    )
