"""
Candidate Pydantic schemas.
"""

from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.base import ApiModel, StrictApiModel, UtcDatetime


class CandidateStage(str, Enum):
    """Pipeline stages, declared in pipeline order."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"

    @property
    def rank(self) -> int:
        return list(CandidateStage).index(self)

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]


STAGE_LABELS = {
    CandidateStage.APPLIED: "Applied",
    CandidateStage.SCREEN: "Screening",
    CandidateStage.TECH: "Technical",
    CandidateStage.OFFER: "Offer",
    CandidateStage.HIRED: "Hired",
    CandidateStage.REJECTED: "Rejected",
}


class CandidateCreate(StrictApiModel):
    """Schema for creating a candidate."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    stage: CandidateStage = CandidateStage.APPLIED
    job_id: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    resume: Optional[str] = Field(default=None, max_length=500)


class CandidateUpdate(StrictApiModel):
    """Schema for a partial candidate update (stage transitions use this)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    stage: Optional[CandidateStage] = None
    job_id: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    resume: Optional[str] = Field(default=None, max_length=500)


class CandidateRead(ApiModel):
    """Schema for reading candidate data (API response)."""

    id: str
    name: str
    email: str
    stage: CandidateStage
    job_id: Optional[str] = None
    applied_at: UtcDatetime
    phone: Optional[str] = None
    resume: Optional[str] = None


class TimelineEventRead(ApiModel):
    """One entry of a candidate's timeline."""

    id: str
    candidate_id: str
    type: str
    from_stage: Optional[CandidateStage] = None
    to_stage: Optional[CandidateStage] = None
    note: Optional[str] = None
    timestamp: UtcDatetime
