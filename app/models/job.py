"""
Job model.

Represents a job posting on the jobs board. Jobs form a reorderable
collection: the ``order`` column holds a dense, zero-based position.
"""

import uuid
from datetime import datetime
from typing import Optional, List

from sqlalchemy import String, Text, Integer, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


def new_job_id() -> str:
    return f"job-{uuid.uuid4().hex[:12]}"


class Job(Base):
    """
    Job table - a posting candidates apply to.

    ``order`` is only changed by the reorder operation; at rest the values
    across the table are exactly 0..N-1.
    """

    __tablename__ = "job"
    __table_args__ = (
        Index("ix_job_order", "order"),
        Index("ix_job_status", "status"),
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=new_job_id,
    )

    title: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    slug: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
    )

    # active | archived
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
    )

    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    department: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
