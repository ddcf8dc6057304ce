"""
Optimistic pipeline-stage transitions for candidates.

A stage change touches one field of one record, so a failed request is
undone by putting the captured prior stage back.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Union

from app.client.api_client import AtsApiClient, CandidateQuery
from app.client.cache import PageCache
from app.client.intents import MutationOutcome, StageIntent
from app.client.notifications import NotificationLog, Notifier
from app.core.config import settings
from app.errors import AppError, MutationInProgressError, NotFoundError, ValidationError
from app.schemas.base import Page
from app.schemas.candidate import CandidateRead, CandidateStage, CandidateUpdate

logger = logging.getLogger(__name__)


class CandidateStageController:
    """Moves candidates between stages on one cached page."""

    def __init__(
        self,
        client: AtsApiClient,
        query: Optional[CandidateQuery] = None,
        notifier: Optional[Notifier] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.query = query or CandidateQuery()
        self.notifier = notifier or NotificationLog()
        self.timeout = settings.CLIENT_TIMEOUT_SECONDS if timeout is None else timeout
        self.cache: PageCache[CandidateRead] = PageCache()
        self._in_flight: Dict[str, StageIntent] = {}

    @property
    def candidates(self) -> List[CandidateRead]:
        return list(self.cache.items)

    def candidate(self, candidate_id: str) -> CandidateRead:
        candidate = self.cache.find(candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate {candidate_id} is not on the current page")
        return candidate

    def is_pending(self, candidate_id: str) -> bool:
        return candidate_id in self._in_flight

    def by_stage(self) -> Dict[CandidateStage, List[CandidateRead]]:
        """Cached candidates grouped into pipeline columns."""
        columns: Dict[CandidateStage, List[CandidateRead]] = {stage: [] for stage in CandidateStage}
        for candidate in self.cache.items:
            columns[candidate.stage].append(candidate)
        return columns

    async def refresh(self) -> Page[CandidateRead]:
        page = await asyncio.wait_for(self.client.list_candidates(self.query), self.timeout)
        self.cache.replace(page)
        return page

    async def transition(self, candidate_id: str, new_stage: Union[CandidateStage, str]) -> MutationOutcome:
        """
        Move a candidate to ``new_stage`` now and confirm with the server.

        On any failure the candidate's previous stage is restored exactly and
        the user is notified.
        """
        try:
            new_stage = self._parse_stage(new_stage)
            if candidate_id in self._in_flight:
                raise MutationInProgressError(f"Candidate {candidate_id} is still being updated")
            candidate = self.candidate(candidate_id)
        except AppError as exc:
            self.notifier.error(str(exc))
            raise

        if candidate.stage == new_stage:
            return MutationOutcome(succeeded=True)

        intent = StageIntent(candidate_id, candidate.stage, new_stage)
        self._in_flight[candidate_id] = intent
        self.cache.update_item(candidate_id, stage=new_stage)

        try:
            updated = await asyncio.wait_for(
                self.client.update_candidate(candidate_id, CandidateUpdate(stage=new_stage)),
                self.timeout,
            )
        except (AppError, asyncio.TimeoutError) as exc:
            self.cache.update_item(candidate_id, stage=intent.prior_stage)
            message = str(exc) if isinstance(exc, AppError) else "Stage update timed out"
            logger.warning(
                "Stage change of %s to %s failed (%s); restored %s",
                candidate_id,
                new_stage.value,
                message,
                intent.prior_stage.value,
            )
            self.notifier.error(message)
            return MutationOutcome(succeeded=False, error=message)
        except BaseException:
            self.cache.update_item(candidate_id, stage=intent.prior_stage)
            raise
        finally:
            self._in_flight.pop(candidate_id, None)

        self.cache.put(updated)
        self.notifier.success(f"Moved to {new_stage.label}")
        return MutationOutcome(succeeded=True)

    @staticmethod
    def _parse_stage(stage: Union[CandidateStage, str]) -> CandidateStage:
        try:
            return CandidateStage(stage)
        except ValueError as exc:
            raise ValidationError(f"Unknown stage {stage!r}") from exc
