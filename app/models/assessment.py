"""
Assessment models.

An assessment is a per-job questionnaire. Its sections and questions are
stored as a single JSON document; submissions keep the raw responses.
"""

import uuid
from datetime import datetime
from typing import Any, Optional, List

from sqlalchemy import String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


class Assessment(Base):
    """Assessment table - one assessment per job."""

    __tablename__ = "assessment"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: f"assessment-{uuid.uuid4().hex[:12]}",
    )

    job_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("job.id"),
        nullable=False,
        unique=True,
    )

    title: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
    )

    sections: Mapped[List[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


class AssessmentSubmission(Base):
    """Submitted responses for an assessment."""

    __tablename__ = "assessment_submission"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: f"submission-{uuid.uuid4().hex[:12]}",
    )

    assessment_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("assessment.id"),
        nullable=True,
    )

    job_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("job.id"),
        nullable=False,
    )

    candidate_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("candidate.id"),
        nullable=True,
    )

    responses: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
