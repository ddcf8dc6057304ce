"""
Assessments router - per-job assessment documents and submissions.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_assessment_service
from app.schemas.assessment import AssessmentRead, AssessmentSubmit, AssessmentUpsert, SubmissionResult
from app.services.assessment_service import AssessmentService

router = APIRouter(prefix="/api/assessments", tags=["assessments"])


@router.get("/{job_id}", response_model=Optional[AssessmentRead])
async def get_assessment(job_id: str, service: AssessmentService = Depends(get_assessment_service)):
    """Get a job's assessment; ``null`` when none has been saved."""
    return await service.get_assessment(job_id)


@router.put("/{job_id}", response_model=AssessmentRead)
async def save_assessment(
    job_id: str,
    data: AssessmentUpsert,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
):
    """Create or replace a job's assessment (201 on create, 200 on replace)."""
    assessment, created = await service.save_assessment(job_id, data)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return assessment


@router.post("/{job_id}/submit", response_model=SubmissionResult)
async def submit_assessment(
    job_id: str,
    data: AssessmentSubmit,
    service: AssessmentService = Depends(get_assessment_service),
):
    """Store a candidate's responses for a job's assessment."""
    submission_id = await service.submit_responses(job_id, data)
    return SubmissionResult(success=True, submission_id=submission_id)
