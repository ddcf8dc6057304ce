"""Unit tests for the latency/failure harness and its policies."""

import random

import pytest

from app.core.config import Settings
from app.errors import TransientServiceError
from app.services.fault_injection import (
    FAILURE_MESSAGES,
    FaultDecision,
    LatencyFailureHarness,
    NoFaultPolicy,
    OperationKind,
    RandomFaultPolicy,
    ScriptedFaultPolicy,
    policy_from_settings,
)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class AlwaysFail:
    def __init__(self, delay: float = 0.0):
        self.delay = delay

    def decide(self, kind):
        return FaultDecision(delay_seconds=self.delay, fail=True)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_mutation_never_runs_effect():
    ran = []

    async def effect():
        ran.append(True)

    sleep = RecordingSleep()
    harness = LatencyFailureHarness(AlwaysFail(delay=0.3), sleep=sleep)

    with pytest.raises(TransientServiceError) as exc_info:
        await harness.run(OperationKind.REORDER, effect)

    assert ran == []
    assert str(exc_info.value) == FAILURE_MESSAGES[OperationKind.REORDER]
    assert sleep.calls == [0.3]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_reads_are_never_failed():
    async def effect():
        return "page"

    harness = LatencyFailureHarness(AlwaysFail(), sleep=RecordingSleep())
    assert await harness.run(OperationKind.READ, effect) == "page"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_fault_policy_does_not_sleep():
    sleep = RecordingSleep()
    harness = LatencyFailureHarness(NoFaultPolicy(), sleep=sleep)

    async def effect():
        return 42

    assert await harness.run(OperationKind.CREATE, effect) == 42
    assert sleep.calls == []


@pytest.mark.unit
def test_random_policy_delay_within_bounds():
    policy = RandomFaultPolicy(min_delay=0.2, max_delay=1.2, rng=random.Random(1))

    delays = [policy.decide(OperationKind.READ).delay_seconds for _ in range(200)]
    assert all(0.2 <= delay <= 1.2 for delay in delays)


@pytest.mark.unit
def test_random_policy_rates_by_kind():
    policy = RandomFaultPolicy(
        min_delay=0,
        max_delay=0,
        write_failure_rate=0.08,
        reorder_failure_rate=0.20,
        rng=random.Random(1234),
    )
    trials = 5000

    reorder_failures = sum(policy.decide(OperationKind.REORDER).fail for _ in range(trials))
    update_failures = sum(policy.decide(OperationKind.UPDATE).fail for _ in range(trials))
    read_failures = sum(policy.decide(OperationKind.READ).fail for _ in range(trials))

    assert 0.16 < reorder_failures / trials < 0.24
    assert 0.05 < update_failures / trials < 0.11
    assert read_failures == 0


@pytest.mark.unit
def test_random_policy_rejects_bad_bounds():
    with pytest.raises(ValueError):
        RandomFaultPolicy(min_delay=1.0, max_delay=0.5)
    with pytest.raises(ValueError):
        RandomFaultPolicy(reorder_failure_rate=1.5)


@pytest.mark.unit
def test_random_policy_from_settings_converts_milliseconds():
    settings = Settings(LATENCY_MIN_MS=100, LATENCY_MAX_MS=300, REORDER_FAILURE_RATE=0.5)
    policy = RandomFaultPolicy.from_settings(settings)

    assert policy.min_delay == pytest.approx(0.1)
    assert policy.max_delay == pytest.approx(0.3)
    assert policy.failure_rate(OperationKind.REORDER) == 0.5


@pytest.mark.unit
def test_policy_from_settings_honours_switch():
    assert isinstance(policy_from_settings(Settings(SIMULATE_FAULTS=False)), NoFaultPolicy)
    assert isinstance(policy_from_settings(Settings(SIMULATE_FAULTS=True)), RandomFaultPolicy)


@pytest.mark.unit
def test_scripted_policy_consumes_outcomes_for_mutations_only():
    policy = ScriptedFaultPolicy([True])

    assert policy.decide(OperationKind.READ).fail is False
    assert policy.decide(OperationKind.UPDATE).fail is True
    assert policy.decide(OperationKind.UPDATE).fail is False

    policy.fail_next(2)
    policy.succeed_next()
    assert [policy.decide(OperationKind.REORDER).fail for _ in range(4)] == [True, True, False, False]
