"""
Candidate business logic service.

Candidates move between pipeline stages by plain field replacement. There
is no cross-record invariant, so writes need no collection lock; a stage
change and its timeline entry are committed in one transaction.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import session_scope
from app.errors import NotFoundError, ValidationError
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.job_repository import JobRepository
from app.schemas.base import Page
from app.schemas.candidate import (
    CandidateCreate,
    CandidateRead,
    CandidateStage,
    CandidateUpdate,
    TimelineEventRead,
)
from app.services.fault_injection import LatencyFailureHarness, OperationKind

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = ("name", "email", "stage")


class CandidateService:
    """Service for candidate business logic."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        harness: LatencyFailureHarness,
    ):
        self._session_maker = session_maker
        self.harness = harness

    async def list_candidates(
        self,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        job_id: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Page[CandidateRead]:
        """List candidates with filters, most recent applications first."""
        if stage == "all":
            stage = None

        async def effect() -> Page[CandidateRead]:
            async with session_scope(self._session_maker) as db:
                repository = CandidateRepository(db)
                total = await repository.count(search=search, stage=stage, job_id=job_id)
                candidates = await repository.list(
                    limit=page_size,
                    offset=(page - 1) * page_size,
                    search=search,
                    stage=stage,
                    job_id=job_id,
                )
                items = [CandidateRead.model_validate(c) for c in candidates]
            return Page[CandidateRead].build(items, total, page, page_size)

        return await self.harness.run(OperationKind.READ, effect)

    async def get_candidate(self, candidate_id: str) -> CandidateRead:
        async def effect() -> CandidateRead:
            async with session_scope(self._session_maker) as db:
                candidate = await CandidateRepository(db).get_by_id(candidate_id)
                if candidate is None:
                    raise NotFoundError(f"Candidate {candidate_id} not found")
                return CandidateRead.model_validate(candidate)

        return await self.harness.run(OperationKind.READ, effect)

    async def create_candidate(self, data: CandidateCreate) -> CandidateRead:
        """Create a candidate and open their timeline."""
        if data.job_id is not None:
            await self._ensure_job_exists(data.job_id)

        async def effect() -> CandidateRead:
            async with session_scope(self._session_maker) as db:
                repository = CandidateRepository(db)
                fields = data.model_dump()
                fields["stage"] = data.stage.value
                candidate = await repository.create(**fields)
                await repository.add_event(
                    candidate.id,
                    "stage_change",
                    to_stage=candidate.stage,
                    note="Application received",
                    timestamp=candidate.applied_at,
                )
                return CandidateRead.model_validate(candidate)

        return await self.harness.run(OperationKind.CREATE, effect)

    async def update_candidate(self, candidate_id: str, data: CandidateUpdate) -> CandidateRead:
        """
        Replace the given fields on a candidate.

        A change of ``stage`` is recorded on the timeline in the same
        transaction; a rejected write leaves both untouched.
        """
        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        if "stage" in changes:
            changes["stage"] = CandidateStage(changes["stage"]).value

        await self._ensure_exists(candidate_id)
        if changes.get("job_id") is not None:
            await self._ensure_job_exists(changes["job_id"])

        async def effect() -> CandidateRead:
            async with session_scope(self._session_maker) as db:
                repository = CandidateRepository(db)
                candidate = await repository.get_by_id(candidate_id)
                if candidate is None:
                    raise NotFoundError(f"Candidate {candidate_id} not found")

                previous_stage = candidate.stage
                candidate = await repository.update(candidate, changes)

                if candidate.stage != previous_stage:
                    new_stage = CandidateStage(candidate.stage)
                    await repository.add_event(
                        candidate_id,
                        "stage_change",
                        from_stage=previous_stage,
                        to_stage=new_stage.value,
                        note=f"Moved to {new_stage.label} stage",
                    )
                    logger.info("Candidate %s moved %s -> %s", candidate_id, previous_stage, new_stage.value)

                return CandidateRead.model_validate(candidate)

        return await self.harness.run(OperationKind.UPDATE, effect)

    async def get_timeline(self, candidate_id: str) -> List[TimelineEventRead]:
        """Stage changes and notes for a candidate, oldest first."""

        async def effect() -> List[TimelineEventRead]:
            async with session_scope(self._session_maker) as db:
                repository = CandidateRepository(db)
                if await repository.get_by_id(candidate_id) is None:
                    raise NotFoundError(f"Candidate {candidate_id} not found")
                events = await repository.list_events(candidate_id)
                return [TimelineEventRead.model_validate(e) for e in events]

        return await self.harness.run(OperationKind.READ, effect)

    async def stage_counts(self, job_id: Optional[str] = None) -> Dict[str, int]:
        """Candidates per stage, every stage present."""

        async def effect() -> Dict[str, int]:
            async with session_scope(self._session_maker) as db:
                counts = await CandidateRepository(db).stage_counts(job_id=job_id)
            return {stage.value: counts.get(stage.value, 0) for stage in CandidateStage}

        return await self.harness.run(OperationKind.READ, effect)

    async def _ensure_exists(self, candidate_id: str) -> None:
        async with session_scope(self._session_maker) as db:
            if await CandidateRepository(db).get_by_id(candidate_id) is None:
                raise NotFoundError(f"Candidate {candidate_id} not found")

    async def _ensure_job_exists(self, job_id: str) -> None:
        async with session_scope(self._session_maker) as db:
            if await JobRepository(db).get_by_id(job_id) is None:
                raise ValidationError(f"Job {job_id} does not exist")
