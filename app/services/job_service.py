"""
Job business logic service.

JobService is the single authority over the jobs collection and its dense
``order`` sequence. One instance lives for the lifetime of the application;
it opens a short transaction per call and serializes every write to the
collection behind an asyncio.Lock.
"""

import asyncio
import logging
import uuid
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import session_scope
from app.errors import NotFoundError, ValidationError
from app.repositories.job_repository import JobRepository
from app.schemas.base import Page
from app.schemas.job import JobCreate, JobRead, JobUpdate
from app.services.fault_injection import LatencyFailureHarness, OperationKind
from app.utils.slug import slugify

logger = logging.getLogger(__name__)

# Fields that may be sent but never cleared to null.
NON_NULLABLE_FIELDS = ("title", "slug", "status", "tags")


class JobService:
    """Service for job business logic, including the reorder algorithm."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        harness: LatencyFailureHarness,
    ):
        self._session_maker = session_maker
        self.harness = harness
        self._write_lock = asyncio.Lock()

    async def list_jobs(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
        sort: str = "order",
    ) -> Page[JobRead]:
        """List one page of jobs. Never mutates positions."""
        if status == "all":
            status = None

        async def effect() -> Page[JobRead]:
            async with session_scope(self._session_maker) as db:
                repository = JobRepository(db)
                total = await repository.count(search=search, status=status)
                jobs = await repository.list(
                    limit=page_size,
                    offset=(page - 1) * page_size,
                    search=search,
                    status=status,
                    sort=sort,
                )
                items = [JobRead.model_validate(job) for job in jobs]
            return Page[JobRead].build(items, total, page, page_size)

        return await self.harness.run(OperationKind.READ, effect)

    async def get_job(self, job_id: str) -> JobRead:
        """Get a job by ID."""

        async def effect() -> JobRead:
            async with session_scope(self._session_maker) as db:
                job = await JobRepository(db).get_by_id(job_id)
                if job is None:
                    raise NotFoundError(f"Job {job_id} not found")
                return JobRead.model_validate(job)

        return await self.harness.run(OperationKind.READ, effect)

    async def create_job(self, data: JobCreate) -> JobRead:
        """
        Create a new job appended at the end of the collection.

        An explicit slug must be unique; a slug derived from the title gets a
        short suffix when it collides.
        """
        if data.slug is not None:
            await self._ensure_slug_available(data.slug)

        async def effect() -> JobRead:
            async with self._write_lock:
                async with session_scope(self._session_maker) as db:
                    repository = JobRepository(db)
                    slug = await self._resolve_slug(repository, data)
                    max_order = await repository.max_order()
                    fields = data.model_dump(exclude={"slug"})
                    job = await repository.create(
                        **fields,
                        slug=slug,
                        order=0 if max_order is None else max_order + 1,
                    )
                    logger.info("Created job %s at position %s", job.id, job.order)
                    return JobRead.model_validate(job)

        return await self.harness.run(OperationKind.CREATE, effect)

    async def update_job(self, job_id: str, data: JobUpdate) -> JobRead:
        """Merge a partial update into a job. Positions are not updatable here."""
        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        await self._ensure_exists(job_id)
        if "slug" in changes:
            await self._ensure_slug_available(changes["slug"], exclude_id=job_id)

        async def effect() -> JobRead:
            async with self._write_lock:
                async with session_scope(self._session_maker) as db:
                    repository = JobRepository(db)
                    job = await repository.get_by_id(job_id)
                    if job is None:
                        raise NotFoundError(f"Job {job_id} not found")
                    if "slug" in changes:
                        clash = await repository.get_by_slug(changes["slug"])
                        if clash is not None and clash.id != job_id:
                            raise ValidationError("Slug must be unique")
                    job = await repository.update(job, changes)
                    return JobRead.model_validate(job)

        return await self.harness.run(OperationKind.UPDATE, effect)

    async def reorder_job(self, job_id: str, from_order: int, to_order: int) -> None:
        """
        Move a job to ``to_order``, shifting the jobs in between by one.

        Moving later decrements every job in (from, to]; moving earlier
        increments every job in [to, from). Only the affected range is
        written, inside one transaction, so the sequence stays 0..N-1.

        The harness decides failure before anything is read or written. The
        stored position of ``job_id`` is re-read and wins over the
        client-supplied ``from_order``.
        """

        async def effect() -> None:
            async with self._write_lock:
                async with session_scope(self._session_maker) as db:
                    repository = JobRepository(db)
                    job = await repository.get_by_id(job_id)
                    if job is None:
                        raise NotFoundError(f"Job {job_id} not found")

                    current = job.order
                    if current != from_order:
                        logger.warning(
                            "Reorder of %s sent from_order=%s but stored order is %s; using stored value",
                            job_id,
                            from_order,
                            current,
                        )

                    size = await repository.count()
                    if not 0 <= to_order < size:
                        raise ValidationError(f"to_order must be between 0 and {size - 1}")

                    if to_order == current:
                        return

                    if to_order > current:
                        shifted = await repository.shift_orders(current + 1, to_order, -1)
                    else:
                        shifted = await repository.shift_orders(to_order, current - 1, 1)
                    await repository.set_order(job_id, to_order)

            logger.info("Moved job %s from %s to %s (%s shifted)", job_id, current, to_order, shifted)

        await self.harness.run(OperationKind.REORDER, effect)

    async def order_snapshot(self) -> Dict[str, int]:
        """Current position of every job, read without latency injection."""
        async with session_scope(self._session_maker) as db:
            return await JobRepository(db).order_map()

    async def _ensure_exists(self, job_id: str) -> None:
        async with session_scope(self._session_maker) as db:
            if await JobRepository(db).get_by_id(job_id) is None:
                raise NotFoundError(f"Job {job_id} not found")

    async def _ensure_slug_available(self, slug: str, exclude_id: Optional[str] = None) -> None:
        async with session_scope(self._session_maker) as db:
            existing = await JobRepository(db).get_by_slug(slug)
        if existing is not None and existing.id != exclude_id:
            raise ValidationError("Slug must be unique")

    async def _resolve_slug(self, repository: JobRepository, data: JobCreate) -> str:
        if data.slug is not None:
            if await repository.get_by_slug(data.slug) is not None:
                raise ValidationError("Slug must be unique")
            return data.slug

        base = slugify(data.title) or "job"
        slug = base
        while await repository.get_by_slug(slug) is not None:
            slug = f"{base}-{uuid.uuid4().hex[:6]}"
        return slug
