"""
Candidate repository - database operations for Candidate and its timeline.
"""

from typing import List, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.candidate import Candidate
from app.models.candidate_timeline_event import CandidateTimelineEvent


class CandidateRepository:
    """Repository for Candidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _filtered(
        self,
        query: Select,
        search: Optional[str],
        stage: Optional[str],
        job_id: Optional[str],
    ) -> Select:
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(Candidate.name).like(pattern),
                    func.lower(Candidate.email).like(pattern),
                )
            )
        if stage:
            query = query.where(Candidate.stage == stage)
        if job_id:
            query = query.where(Candidate.job_id == job_id)
        return query

    async def list(
        self,
        limit: int = 50,
        offset: int = 0,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> List[Candidate]:
        """List candidates with filters, most recent applications first."""
        query = self._filtered(select(Candidate), search, stage, job_id)
        query = query.order_by(Candidate.applied_at.desc(), Candidate.id)
        query = query.limit(limit).offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> int:
        query = self._filtered(select(func.count()).select_from(Candidate), search, stage, job_id)
        result = await self.db.execute(query)
        return int(result.scalar_one())

    async def get_by_id(self, candidate_id: str) -> Optional[Candidate]:
        """Get a candidate by ID."""
        result = await self.db.execute(select(Candidate).where(Candidate.id == candidate_id))
        return result.scalar_one_or_none()

    async def create(self, **fields) -> Candidate:
        """Create a new candidate."""
        candidate = Candidate(**fields)
        self.db.add(candidate)
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def update(self, candidate: Candidate, changes: dict) -> Candidate:
        """Replace the given fields on a loaded candidate."""
        for field, value in changes.items():
            setattr(candidate, field, value)

        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def add_event(self, candidate_id: str, event_type: str, **fields) -> CandidateTimelineEvent:
        event = CandidateTimelineEvent(candidate_id=candidate_id, type=event_type, **fields)
        self.db.add(event)
        await self.db.flush()
        return event

    async def list_events(self, candidate_id: str) -> List[CandidateTimelineEvent]:
        """Timeline events for a candidate, oldest first."""
        result = await self.db.execute(
            select(CandidateTimelineEvent)
            .where(CandidateTimelineEvent.candidate_id == candidate_id)
            .order_by(CandidateTimelineEvent.timestamp.asc(), CandidateTimelineEvent.id)
        )
        return list(result.scalars().all())

    async def stage_counts(self, job_id: Optional[str] = None) -> dict:
        """Number of candidates per stage."""
        query = select(Candidate.stage, func.count()).group_by(Candidate.stage)
        if job_id:
            query = query.where(Candidate.job_id == job_id)
        result = await self.db.execute(query)
        return {stage: count for stage, count in result.all()}
