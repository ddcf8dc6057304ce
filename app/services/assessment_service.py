"""
Assessment business logic service.
"""

from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import session_scope
from app.errors import NotFoundError, ValidationError
from app.repositories.assessment_repository import AssessmentRepository
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.job_repository import JobRepository
from app.schemas.assessment import AssessmentRead, AssessmentSubmit, AssessmentUpsert
from app.services.fault_injection import LatencyFailureHarness, OperationKind


class AssessmentService:
    """Service for assessment business logic."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        harness: LatencyFailureHarness,
    ):
        self._session_maker = session_maker
        self.harness = harness

    async def get_assessment(self, job_id: str) -> Optional[AssessmentRead]:
        """Get the assessment for a job, or None when the job has none yet."""

        async def effect() -> Optional[AssessmentRead]:
            async with session_scope(self._session_maker) as db:
                assessment = await AssessmentRepository(db).get_by_job(job_id)
                if assessment is None:
                    return None
                return AssessmentRead.model_validate(assessment)

        return await self.harness.run(OperationKind.READ, effect)

    async def save_assessment(self, job_id: str, data: AssessmentUpsert) -> Tuple[AssessmentRead, bool]:
        """Create or replace a job's assessment. Returns (assessment, created)."""
        await self._ensure_job_exists(job_id)

        async def effect() -> Tuple[AssessmentRead, bool]:
            async with session_scope(self._session_maker) as db:
                repository = AssessmentRepository(db)
                existing = await repository.get_by_job(job_id)
                payload = data.model_dump()
                if existing is None:
                    assessment = await repository.create(job_id, payload)
                    return AssessmentRead.model_validate(assessment), True
                assessment = await repository.update(existing, payload)
                return AssessmentRead.model_validate(assessment), False

        return await self.harness.run(OperationKind.UPDATE, effect)

    async def submit_responses(self, job_id: str, data: AssessmentSubmit) -> str:
        """Store a candidate's responses. Returns the submission id."""
        await self._ensure_job_exists(job_id)
        if data.candidate_id is not None:
            async with session_scope(self._session_maker) as db:
                if await CandidateRepository(db).get_by_id(data.candidate_id) is None:
                    raise ValidationError(f"Candidate {data.candidate_id} does not exist")

        async def effect() -> str:
            async with session_scope(self._session_maker) as db:
                repository = AssessmentRepository(db)
                assessment = await repository.get_by_job(job_id)
                submission = await repository.add_submission(
                    assessment_id=assessment.id if assessment else None,
                    job_id=job_id,
                    candidate_id=data.candidate_id,
                    responses=data.responses,
                )
                return submission.id

        return await self.harness.run(OperationKind.CREATE, effect)

    async def _ensure_job_exists(self, job_id: str) -> None:
        async with session_scope(self._session_maker) as db:
            if await JobRepository(db).get_by_id(job_id) is None:
                raise NotFoundError(f"Job {job_id} not found")
