"""Client side: HTTP client, page cache and optimistic mutation controllers."""

from app.client.api_client import AtsApiClient, CandidateQuery, JobQuery
from app.client.cache import PageCache
from app.client.intents import MutationOutcome, ReorderIntent, StageIntent
from app.client.notifications import Notification, NotificationLog, Notifier
from app.client.reorder_controller import JobReorderController, ReorderState, move_locally
from app.client.stage_controller import CandidateStageController

__all__ = [
    "AtsApiClient",
    "CandidateQuery",
    "CandidateStageController",
    "JobQuery",
    "JobReorderController",
    "MutationOutcome",
    "Notification",
    "NotificationLog",
    "Notifier",
    "PageCache",
    "ReorderIntent",
    "ReorderState",
    "StageIntent",
    "move_locally",
]
