"""
Mutation intents: what a controller needs to undo one optimistic change.

An intent is created right before the local write and dropped as soon as the
matching request resolves.
"""

from dataclasses import dataclass
from typing import Optional

from app.client.cache import PageCache
from app.schemas.candidate import CandidateStage
from app.schemas.job import JobRead


@dataclass
class ReorderIntent:
    job_id: str
    from_index: int
    from_order: int
    snapshot: PageCache[JobRead]
    to_index: Optional[int] = None
    to_order: Optional[int] = None


@dataclass(frozen=True)
class StageIntent:
    candidate_id: str
    prior_stage: CandidateStage
    requested_stage: CandidateStage


@dataclass(frozen=True)
class MutationOutcome:
    """Result of one optimistic mutation as seen by the caller."""

    succeeded: bool
    resynced: bool = False
    error: Optional[str] = None
