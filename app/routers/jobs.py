"""
Jobs router - API endpoints for the jobs board.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.config import Settings
from app.core.dependencies import get_job_service, get_settings
from app.schemas.base import Page
from app.schemas.job import JobCreate, JobRead, JobReorderRequest, JobSort, JobUpdate, ReorderResult
from app.services.job_service import JobService

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("", response_model=Page[JobRead])
async def list_jobs(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1),
    sort: JobSort = "order",
    service: JobService = Depends(get_job_service),
    settings: Settings = Depends(get_settings),
):
    """
    List jobs with pagination and filters.

    Search matches title, department and location (case-insensitive).
    Sort is ``order`` (board position) or ``createdAt`` (newest first).
    """
    size = min(page_size or settings.DEFAULT_JOBS_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return await service.list_jobs(
        search=search,
        status=status_filter,
        page=page,
        page_size=size,
        sort=sort,
    )


@router.get("/{job_id}", response_model=JobRead)
async def get_job(job_id: str, service: JobService = Depends(get_job_service)):
    """Get a job by ID."""
    return await service.get_job(job_id)


@router.post("", response_model=JobRead, status_code=status.HTTP_201_CREATED)
async def create_job(data: JobCreate, service: JobService = Depends(get_job_service)):
    """Create a new job at the end of the board."""
    return await service.create_job(data)


@router.patch("/{job_id}", response_model=JobRead)
async def update_job(job_id: str, data: JobUpdate, service: JobService = Depends(get_job_service)):
    """Update a job. Positions are changed through /reorder only."""
    return await service.update_job(job_id, data)


@router.patch("/{job_id}/reorder", response_model=ReorderResult)
async def reorder_job(
    job_id: str,
    request: JobReorderRequest,
    service: JobService = Depends(get_job_service),
):
    """
    Move a job to a new board position.

    On failure nothing has been written; clients should re-fetch the page.
    """
    await service.reorder_job(job_id, request.from_order, request.to_order)
    return ReorderResult(success=True)
