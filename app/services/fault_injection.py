"""
Latency and failure injection for store operations.

Every service call goes through LatencyFailureHarness.run(). A FaultPolicy
decides, per operation kind only, how long the call is delayed and whether
it fails. The failure decision is taken before the wrapped effect runs, so a
failed write never touches the database.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque, Iterable, Optional, Protocol, TypeVar

from app.core.config import Settings
from app.errors import TransientServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationKind(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    REORDER = "reorder"

    @property
    def is_mutation(self) -> bool:
        return self is not OperationKind.READ


FAILURE_MESSAGES = {
    OperationKind.CREATE: "Failed to create record. Please try again.",
    OperationKind.UPDATE: "Failed to update record. Please try again.",
    OperationKind.REORDER: "Reorder failed. Rolling back changes.",
}


@dataclass(frozen=True)
class FaultDecision:
    delay_seconds: float = 0.0
    fail: bool = False


class FaultPolicy(Protocol):
    """Decides delay and outcome for one operation."""

    def decide(self, kind: OperationKind) -> FaultDecision:
        ...


class NoFaultPolicy:
    """Zero delay, never fails."""

    def decide(self, kind: OperationKind) -> FaultDecision:
        return FaultDecision()


class RandomFaultPolicy:
    """
    Uniform latency in [min_delay, max_delay] and independent failure draws.

    Reads are only delayed. Creates and updates fail with ``write_failure_rate``;
    reorders fail with ``reorder_failure_rate``.
    """

    def __init__(
        self,
        min_delay: float = 0.2,
        max_delay: float = 1.2,
        write_failure_rate: float = 0.08,
        reorder_failure_rate: float = 0.20,
        rng: Optional[random.Random] = None,
    ) -> None:
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("delay bounds must satisfy 0 <= min_delay <= max_delay")
        for rate in (write_failure_rate, reorder_failure_rate):
            if not 0.0 <= rate <= 1.0:
                raise ValueError("failure rates must be within [0, 1]")
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.write_failure_rate = write_failure_rate
        self.reorder_failure_rate = reorder_failure_rate
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Settings, rng: Optional[random.Random] = None) -> "RandomFaultPolicy":
        return cls(
            min_delay=settings.LATENCY_MIN_MS / 1000,
            max_delay=settings.LATENCY_MAX_MS / 1000,
            write_failure_rate=settings.WRITE_FAILURE_RATE,
            reorder_failure_rate=settings.REORDER_FAILURE_RATE,
            rng=rng,
        )

    def failure_rate(self, kind: OperationKind) -> float:
        if kind is OperationKind.REORDER:
            return self.reorder_failure_rate
        if kind.is_mutation:
            return self.write_failure_rate
        return 0.0

    def decide(self, kind: OperationKind) -> FaultDecision:
        delay = self._rng.uniform(self.min_delay, self.max_delay)
        fail = self._rng.random() < self.failure_rate(kind)
        return FaultDecision(delay_seconds=delay, fail=fail)


class ScriptedFaultPolicy:
    """
    Deterministic policy for tests.

    Mutations consume queued outcomes in order (``True`` means fail); once
    the queue is empty every mutation succeeds. Reads never fail.
    """

    def __init__(self, outcomes: Iterable[bool] = (), delay_seconds: float = 0.0) -> None:
        self._outcomes: Deque[bool] = deque(outcomes)
        self.delay_seconds = delay_seconds
        self.decided: list[OperationKind] = []

    def fail_next(self, count: int = 1) -> None:
        self._outcomes.extend([True] * count)

    def succeed_next(self, count: int = 1) -> None:
        self._outcomes.extend([False] * count)

    def decide(self, kind: OperationKind) -> FaultDecision:
        self.decided.append(kind)
        fail = False
        if kind.is_mutation and self._outcomes:
            fail = self._outcomes.popleft()
        return FaultDecision(delay_seconds=self.delay_seconds, fail=fail)


def policy_from_settings(settings: Settings) -> FaultPolicy:
    if settings.SIMULATE_FAULTS:
        return RandomFaultPolicy.from_settings(settings)
    return NoFaultPolicy()


class LatencyFailureHarness:
    """Wraps store effects with the policy's latency and failure outcome."""

    def __init__(
        self,
        policy: FaultPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.policy = policy
        self._sleep = sleep

    async def run(self, kind: OperationKind, effect: Callable[[], Awaitable[T]]) -> T:
        decision = self.policy.decide(kind)
        if decision.delay_seconds > 0:
            await self._sleep(decision.delay_seconds)

        if decision.fail and kind.is_mutation:
            logger.warning("Injected %s failure after %.3fs", kind.value, decision.delay_seconds)
            raise TransientServiceError(FAILURE_MESSAGES[kind])

        return await effect()
