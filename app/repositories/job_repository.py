"""
Job repository - database operations for Job.
"""

from typing import Dict, List, Optional

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.job import Job


class JobRepository:
    """Repository for Job database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _filtered(self, query: Select, search: Optional[str], status: Optional[str]) -> Select:
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(Job.title).like(pattern),
                    func.lower(func.coalesce(Job.department, "")).like(pattern),
                    func.lower(func.coalesce(Job.location, "")).like(pattern),
                )
            )
        if status:
            query = query.where(Job.status == status)
        return query

    async def list(
        self,
        limit: int = 10,
        offset: int = 0,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort: str = "order",
    ) -> List[Job]:
        """List jobs with filters, sorted by position or newest first."""
        query = self._filtered(select(Job), search, status)

        if sort == "createdAt":
            query = query.order_by(Job.created_at.desc(), Job.id)
        else:
            query = query.order_by(Job.order.asc(), Job.id)

        query = query.limit(limit).offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, search: Optional[str] = None, status: Optional[str] = None) -> int:
        query = self._filtered(select(func.count()).select_from(Job), search, status)
        result = await self.db.execute(query)
        return int(result.scalar_one())

    async def get_by_id(self, job_id: str) -> Optional[Job]:
        """Get a job by ID."""
        result = await self.db.execute(select(Job).where(Job.id == job_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Job]:
        result = await self.db.execute(select(Job).where(Job.slug == slug))
        return result.scalar_one_or_none()

    async def max_order(self) -> Optional[int]:
        """Highest position in use, or None for an empty collection."""
        result = await self.db.execute(select(func.max(Job.order)))
        return result.scalar_one_or_none()

    async def order_map(self) -> Dict[str, int]:
        """Snapshot of every job's position, keyed by id."""
        result = await self.db.execute(select(Job.id, Job.order))
        return {job_id: order for job_id, order in result.all()}

    async def create(self, **fields) -> Job:
        """Create a new job from already-validated fields."""
        job = Job(**fields)
        self.db.add(job)
        await self.db.flush()
        await self.db.refresh(job)
        return job

    async def update(self, job: Job, changes: dict) -> Job:
        """Apply a partial update to a loaded job."""
        for field, value in changes.items():
            setattr(job, field, value)

        await self.db.flush()
        await self.db.refresh(job)
        return job

    async def shift_orders(self, lower: int, upper: int, delta: int) -> int:
        """
        Add ``delta`` to every position in the inclusive range [lower, upper].

        Returns the number of rows touched.
        """
        result = await self.db.execute(
            update(Job)
            .where(Job.order >= lower, Job.order <= upper)
            .values(order=Job.order + delta)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def set_order(self, job_id: str, order: int) -> None:
        await self.db.execute(
            update(Job)
            .where(Job.id == job_id)
            .values(order=order)
            .execution_options(synchronize_session=False)
        )
