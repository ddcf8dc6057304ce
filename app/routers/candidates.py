"""
Candidates router - API endpoints for candidates and their pipeline stage.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.config import Settings
from app.core.dependencies import get_candidate_service, get_settings
from app.schemas.base import Page
from app.schemas.candidate import CandidateCreate, CandidateRead, CandidateUpdate, TimelineEventRead
from app.services.candidate_service import CandidateService

router = APIRouter(prefix="/api/candidates", tags=["candidates"])


@router.get("", response_model=Page[CandidateRead])
async def list_candidates(
    search: Optional[str] = None,
    stage: Optional[str] = None,
    job_id: Optional[str] = Query(None, alias="jobId"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1),
    service: CandidateService = Depends(get_candidate_service),
    settings: Settings = Depends(get_settings),
):
    """
    List candidates with pagination and filters.

    Filters: search (name/email), stage, jobId.
    """
    size = min(page_size or settings.DEFAULT_CANDIDATES_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return await service.list_candidates(
        search=search,
        stage=stage,
        job_id=job_id,
        page=page,
        page_size=size,
    )


@router.get("/stage-counts", response_model=Dict[str, int])
async def stage_counts(
    job_id: Optional[str] = Query(None, alias="jobId"),
    service: CandidateService = Depends(get_candidate_service),
):
    """Number of candidates in each pipeline stage."""
    return await service.stage_counts(job_id=job_id)


@router.post("", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(data: CandidateCreate, service: CandidateService = Depends(get_candidate_service)):
    """Create a new candidate."""
    return await service.create_candidate(data)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(candidate_id: str, service: CandidateService = Depends(get_candidate_service)):
    """Get a candidate by ID."""
    return await service.get_candidate(candidate_id)


@router.patch("/{candidate_id}", response_model=CandidateRead)
async def update_candidate(
    candidate_id: str,
    data: CandidateUpdate,
    service: CandidateService = Depends(get_candidate_service),
):
    """
    Update a candidate.

    Stage transitions are sent here as ``{"stage": "<stage>"}``.
    """
    return await service.update_candidate(candidate_id, data)


@router.get("/{candidate_id}/timeline", response_model=List[TimelineEventRead])
async def get_timeline(candidate_id: str, service: CandidateService = Depends(get_candidate_service)):
    """Stage changes and notes for a candidate, oldest first."""
    return await service.get_timeline(candidate_id)
