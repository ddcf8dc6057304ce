"""
Non-blocking user notifications (the toasts of the web UI).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


@dataclass
class NotificationLog:
    """Keeps every notification in memory and mirrors it to the log."""

    entries: List[Notification] = field(default_factory=list)

    def success(self, message: str) -> None:
        logger.info("%s", message)
        self.entries.append(Notification("success", message))

    def error(self, message: str) -> None:
        logger.warning("%s", message)
        self.entries.append(Notification("error", message))

    @property
    def errors(self) -> List[str]:
        return [entry.message for entry in self.entries if entry.level == "error"]

    @property
    def successes(self) -> List[str]:
        return [entry.message for entry in self.entries if entry.level == "success"]
