"""
FastAPI dependencies.

Services are built once by create_app() and stored on ``app.state``;
endpoints receive them through these functions so tests can swap them.
"""

from fastapi import Request

from app.core.config import Settings
from app.services.assessment_service import AssessmentService
from app.services.candidate_service import CandidateService
from app.services.job_service import JobService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_job_service(request: Request) -> JobService:
    return request.app.state.job_service


def get_candidate_service(request: Request) -> CandidateService:
    return request.app.state.candidate_service


def get_assessment_service(request: Request) -> AssessmentService:
    return request.app.state.assessment_service
