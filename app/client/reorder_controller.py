"""
Optimistic reordering of the jobs board.

The controller moves a job inside the visible page immediately, then asks
the server to reorder. A failed request is never undone locally: the shift
on the server can reach jobs outside this page, so the controller re-fetches
the page instead (resync) and only falls back to its snapshot when that
fetch fails too.

Per gesture: IDLE -> DRAGGING -> COMMITTING -> SETTLED | ROLLING_BACK (-> IDLE).
A new gesture cannot start while a previous one is COMMITTING or ROLLING_BACK.
"""

import asyncio
import enum
import logging
from typing import List, Optional

from app.client.api_client import AtsApiClient, JobQuery
from app.client.cache import PageCache
from app.client.intents import MutationOutcome, ReorderIntent
from app.client.notifications import NotificationLog, Notifier
from app.core.config import settings
from app.errors import AppError, MutationInProgressError, NotFoundError, ValidationError
from app.schemas.base import Page
from app.schemas.job import JobRead

logger = logging.getLogger(__name__)


class ReorderState(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    SETTLED = "settled"
    ROLLING_BACK = "rolling_back"


BUSY_STATES = (ReorderState.COMMITTING, ReorderState.ROLLING_BACK)


def move_locally(items: List[JobRead], from_index: int, to_index: int) -> List[JobRead]:
    """
    Move one job within a page and hand the page's order values out again.

    The visible order values are redistributed in ascending order over the
    new sequence, which is exactly what the server's shift produces for a
    contiguous page. On a filtered page the server also shifts hidden jobs
    inside the range, so only the visible sequence is guaranteed to match;
    the controller re-reads such pages once the move is confirmed.
    """
    orders = sorted(job.order for job in items)
    arranged = list(items)
    arranged.insert(to_index, arranged.pop(from_index))
    return [
        job if job.order == order else job.model_copy(update={"order": order})
        for job, order in zip(arranged, orders)
    ]


class JobReorderController:
    """Drives optimistic moves of jobs on one page of the board."""

    def __init__(
        self,
        client: AtsApiClient,
        query: Optional[JobQuery] = None,
        notifier: Optional[Notifier] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.query = query or JobQuery()
        self.notifier = notifier or NotificationLog()
        self.timeout = settings.CLIENT_TIMEOUT_SECONDS if timeout is None else timeout
        self.cache: PageCache[JobRead] = PageCache()
        self.state = ReorderState.IDLE
        self._intent: Optional[ReorderIntent] = None

    @property
    def jobs(self) -> List[JobRead]:
        return list(self.cache.items)

    @property
    def is_busy(self) -> bool:
        return self.state in BUSY_STATES

    @property
    def intent(self) -> Optional[ReorderIntent]:
        return self._intent

    @property
    def is_filtered(self) -> bool:
        return bool(self.query.search) or self.query.status not in (None, "", "all")

    async def refresh(self) -> Page[JobRead]:
        """Reconcile: fetch the current page and replace the cache with it."""
        page = await asyncio.wait_for(self.client.list_jobs(self.query), self.timeout)
        self.cache.replace(page)
        return page

    async def go_to_page(self, page: int) -> Page[JobRead]:
        self._ensure_not_busy()
        self.query.page = page
        return await self.refresh()

    def begin_drag(self, job_id: str) -> ReorderIntent:
        """Start a gesture on a visible job and capture the page as it is now."""
        self._ensure_not_busy()
        if self.query.sort != "order":
            raise ValidationError("Jobs can only be reordered when sorted by board order")
        index = self.cache.index_of(job_id)
        if index is None:
            raise NotFoundError(f"Job {job_id} is not on the current page")

        self._intent = ReorderIntent(
            job_id=job_id,
            from_index=index,
            from_order=self.cache.items[index].order,
            snapshot=self.cache.snapshot(),
        )
        self.state = ReorderState.DRAGGING
        return self._intent

    def cancel_drag(self) -> None:
        if self.state is ReorderState.DRAGGING:
            self._intent = None
            self.state = ReorderState.IDLE

    async def move_record(self, job_id: str, to_position: int) -> MutationOutcome:
        """
        Move ``job_id`` to index ``to_position`` of the visible page.

        Raises MutationInProgressError while a previous move is unsettled,
        NotFoundError for a job that is not on the page and ValidationError for
        a position outside it or a page not sorted by order. None of these
        touch the cache.
        """
        try:
            intent = self._intent
            if self.state is not ReorderState.DRAGGING or intent is None or intent.job_id != job_id:
                intent = self.begin_drag(job_id)
            if not 0 <= to_position < len(self.cache.items):
                self.cancel_drag()
                raise ValidationError(f"Position {to_position} is outside the current page")
        except AppError as exc:
            self.notifier.error(str(exc))
            raise

        if to_position == intent.from_index:
            self._settle()
            return MutationOutcome(succeeded=True)

        intent.to_index = to_position
        intent.to_order = self.cache.items[to_position].order
        self.cache.items = move_locally(self.cache.items, intent.from_index, to_position)
        self.state = ReorderState.COMMITTING

        try:
            await asyncio.wait_for(
                self.client.reorder_job(job_id, intent.from_order, intent.to_order),
                self.timeout,
            )
        except (AppError, asyncio.TimeoutError) as exc:
            return await self._resync(intent, exc)
        except BaseException:
            # Cancelled: there is no chance to re-fetch, so fall back to the snapshot.
            self._abandon(intent)
            raise

        try:
            if self.is_filtered:
                await self._reread_after_move()
        finally:
            self._settle()
        self.notifier.success("Job reordered successfully")
        return MutationOutcome(succeeded=True)

    async def _reread_after_move(self) -> None:
        try:
            await self.refresh()
        except (AppError, asyncio.TimeoutError) as exc:
            logger.warning(
                "Reorder saved but page %s could not be re-read (%s); keeping the local arrangement",
                self.query.page,
                exc,
            )

    def _settle(self) -> None:
        self._intent = None
        self.state = ReorderState.SETTLED

    def _abandon(self, intent: ReorderIntent) -> None:
        self.cache.restore(intent.snapshot)
        self._intent = None
        self.state = ReorderState.IDLE

    async def _resync(self, intent: ReorderIntent, exc: BaseException) -> MutationOutcome:
        self.state = ReorderState.ROLLING_BACK
        message = str(exc) if isinstance(exc, AppError) else "Reorder timed out. Rolling back..."
        logger.warning(
            "Reorder of %s from %s to %s failed (%s); re-fetching page %s",
            intent.job_id,
            intent.from_order,
            intent.to_order,
            message,
            self.query.page,
        )
        self.notifier.error(message)

        resynced = True
        try:
            await self.refresh()
        except (AppError, asyncio.TimeoutError):
            # Keep the last page the server confirmed.
            self.cache.restore(intent.snapshot)
            resynced = False
            self.notifier.error("Could not reload jobs; showing the last known order")
        except BaseException:
            self._abandon(intent)
            raise

        self._intent = None
        self.state = ReorderState.IDLE
        return MutationOutcome(succeeded=False, resynced=resynced, error=message)

    def _ensure_not_busy(self) -> None:
        if self.is_busy:
            raise MutationInProgressError("Wait for the previous move to finish")
