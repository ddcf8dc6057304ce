"""
Assessment repository - database operations for Assessment and submissions.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.assessment import Assessment, AssessmentSubmission


class AssessmentRepository:
    """Repository for Assessment database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_job(self, job_id: str) -> Optional[Assessment]:
        result = await self.db.execute(select(Assessment).where(Assessment.job_id == job_id))
        return result.scalar_one_or_none()

    async def create(self, job_id: str, data: dict) -> Assessment:
        assessment = Assessment(job_id=job_id, **data)
        self.db.add(assessment)
        await self.db.flush()
        await self.db.refresh(assessment)
        return assessment

    async def update(self, assessment: Assessment, data: dict) -> Assessment:
        for field, value in data.items():
            setattr(assessment, field, value)

        await self.db.flush()
        await self.db.refresh(assessment)
        return assessment

    async def add_submission(self, **fields) -> AssessmentSubmission:
        submission = AssessmentSubmission(**fields)
        self.db.add(submission)
        await self.db.flush()
        return submission

