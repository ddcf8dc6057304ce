"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.job import Job
from app.models.candidate import Candidate
from app.models.candidate_timeline_event import CandidateTimelineEvent
from app.models.assessment import Assessment, AssessmentSubmission

# Export all models
__all__ = [
    "Job",
    "Candidate",
    "CandidateTimelineEvent",
    "Assessment",
    "AssessmentSubmission",
]
