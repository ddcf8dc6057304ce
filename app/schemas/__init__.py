"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.base import Page
from app.schemas.job import JobCreate, JobUpdate, JobRead, JobReorderRequest, ReorderResult
from app.schemas.candidate import (
    CandidateStage,
    CandidateCreate,
    CandidateUpdate,
    CandidateRead,
    TimelineEventRead,
)
from app.schemas.assessment import AssessmentUpsert, AssessmentRead, AssessmentSubmit, SubmissionResult

__all__ = [
    "Page",
    "JobCreate",
    "JobUpdate",
    "JobRead",
    "JobReorderRequest",
    "ReorderResult",
    "CandidateStage",
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateRead",
    "TimelineEventRead",
    "AssessmentUpsert",
    "AssessmentRead",
    "AssessmentSubmit",
    "SubmissionResult",
]
