"""
Assessment Pydantic schemas.

Sections and questions are kept as free-form JSON; the builder that edits
them lives in the front end.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.base import ApiModel, StrictApiModel, UtcDatetime


class AssessmentUpsert(ApiModel):
    """Create-or-replace payload for a job's assessment."""

    title: Optional[str] = Field(default=None, max_length=200)
    sections: List[Dict[str, Any]] = Field(default_factory=list)


class AssessmentRead(ApiModel):
    id: str
    job_id: str
    title: Optional[str] = None
    sections: List[Dict[str, Any]]
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AssessmentSubmit(StrictApiModel):
    """Candidate responses keyed by question id."""

    candidate_id: Optional[str] = None
    responses: Dict[str, Any] = Field(default_factory=dict)


class SubmissionResult(ApiModel):
    success: bool = True
    submission_id: str
