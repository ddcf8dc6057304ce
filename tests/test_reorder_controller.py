"""Optimistic job reordering against the in-process API."""

import asyncio

import pytest

from app.client.api_client import JobQuery
from app.client.notifications import NotificationLog
from app.client.reorder_controller import JobReorderController, ReorderState, move_locally
from app.errors import MutationInProgressError, NotFoundError, TransientServiceError, ValidationError
from app.schemas.job import JobRead, JobUpdate
from app.utils.time import utc_now


def titles(jobs):
    return [job.title for job in jobs]


def make_job(index: int, order: int) -> JobRead:
    return JobRead(
        id=f"job-{index}",
        title=f"J{index}",
        slug=f"j{index}",
        status="active",
        tags=[],
        order=order,
        created_at=utc_now(),
    )


@pytest.fixture
def notifier():
    return NotificationLog()


@pytest.fixture
def controller(api, notifier):
    return JobReorderController(api, JobQuery(page_size=10), notifier, timeout=2.0)


@pytest.mark.unit
def test_move_locally_reuses_visible_orders():
    page = [make_job(i, 10 + i) for i in range(5)]

    moved = move_locally(page, 0, 2)

    assert titles(moved) == ["J1", "J2", "J0", "J3", "J4"]
    assert [job.order for job in moved] == [10, 11, 12, 13, 14]
    assert page[0].order == 10


@pytest.mark.db
@pytest.mark.asyncio
async def test_successful_move(controller, notifier, five_jobs, job_service):
    await controller.refresh()

    outcome = await controller.move_record(five_jobs[1].id, 3)

    assert outcome.succeeded
    assert controller.state is ReorderState.SETTLED
    assert titles(controller.jobs) == ["J0", "J2", "J3", "J1", "J4"]
    assert [job.order for job in controller.jobs] == [0, 1, 2, 3, 4]
    assert notifier.successes == ["Job reordered successfully"]

    snapshot = await job_service.order_snapshot()
    assert {job.id: job.order for job in controller.jobs} == snapshot


@pytest.mark.db
@pytest.mark.asyncio
async def test_failed_move_resyncs_from_server(controller, notifier, five_jobs, fault_policy, job_service):
    await controller.refresh()
    fault_policy.fail_next()

    outcome = await controller.move_record(five_jobs[1].id, 3)

    assert not outcome.succeeded
    assert outcome.resynced
    assert controller.state is ReorderState.IDLE
    assert titles(controller.jobs) == ["J0", "J1", "J2", "J3", "J4"]
    assert notifier.errors == ["Reorder failed. Rolling back changes."]
    assert {job.id: job.order for job in controller.jobs} == await job_service.order_snapshot()


@pytest.mark.db
@pytest.mark.asyncio
async def test_failed_refetch_restores_snapshot(controller, notifier, api, five_jobs, fault_policy, monkeypatch):
    await controller.refresh()
    fault_policy.fail_next()

    async def unreachable(query=None):
        raise TransientServiceError("Could not reach server")

    monkeypatch.setattr(api, "list_jobs", unreachable)

    outcome = await controller.move_record(five_jobs[0].id, 4)

    assert not outcome.succeeded
    assert not outcome.resynced
    assert titles(controller.jobs) == ["J0", "J1", "J2", "J3", "J4"]
    assert notifier.errors[-1] == "Could not reload jobs; showing the last known order"


@pytest.mark.db
@pytest.mark.asyncio
async def test_timed_out_move_is_treated_as_failure(api, notifier, five_jobs, monkeypatch):
    controller = JobReorderController(api, JobQuery(), notifier, timeout=0.05)
    await controller.refresh()

    async def hang(job_id, from_order, to_order):
        await asyncio.sleep(1)

    monkeypatch.setattr(api, "reorder_job", hang)

    outcome = await controller.move_record(five_jobs[2].id, 0)

    assert not outcome.succeeded
    assert outcome.resynced
    assert titles(controller.jobs) == ["J0", "J1", "J2", "J3", "J4"]
    assert notifier.errors == ["Reorder timed out. Rolling back..."]


@pytest.mark.db
@pytest.mark.asyncio
async def test_second_move_is_rejected_while_committing(controller, notifier, api, five_jobs, monkeypatch):
    await controller.refresh()
    release = asyncio.Event()
    real_reorder = api.reorder_job

    async def slow_reorder(job_id, from_order, to_order):
        await release.wait()
        await real_reorder(job_id, from_order, to_order)

    monkeypatch.setattr(api, "reorder_job", slow_reorder)

    first = asyncio.create_task(controller.move_record(five_jobs[0].id, 2))
    await asyncio.sleep(0)
    assert controller.state is ReorderState.COMMITTING

    with pytest.raises(MutationInProgressError):
        await controller.move_record(five_jobs[4].id, 0)
    assert notifier.errors == ["Wait for the previous move to finish"]

    release.set()
    outcome = await first
    assert outcome.succeeded
    assert titles(controller.jobs) == ["J1", "J2", "J0", "J3", "J4"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_same_position_sends_nothing(controller, api, five_jobs, monkeypatch):
    await controller.refresh()

    async def must_not_call(*args):
        raise AssertionError("reorder should not be sent")

    monkeypatch.setattr(api, "reorder_job", must_not_call)

    outcome = await controller.move_record(five_jobs[3].id, 3)

    assert outcome.succeeded
    assert controller.state is ReorderState.SETTLED


@pytest.mark.db
@pytest.mark.asyncio
async def test_invalid_moves_leave_cache_alone(controller, notifier, five_jobs):
    await controller.refresh()
    before = controller.jobs

    with pytest.raises(NotFoundError):
        await controller.move_record("job-elsewhere", 0)
    with pytest.raises(ValidationError):
        await controller.move_record(five_jobs[0].id, 9)

    assert controller.jobs == before
    assert controller.state is ReorderState.IDLE
    assert len(notifier.errors) == 2


@pytest.mark.db
@pytest.mark.asyncio
async def test_move_within_later_page(api, notifier, make_jobs, job_service):
    await make_jobs(6)
    controller = JobReorderController(api, JobQuery(page_size=2), notifier)
    await controller.go_to_page(2)
    assert titles(controller.jobs) == ["J2", "J3"]

    outcome = await controller.move_record(controller.jobs[1].id, 0)

    assert outcome.succeeded
    assert titles(controller.jobs) == ["J3", "J2"]
    assert [job.order for job in controller.jobs] == [2, 3]
    await controller.refresh()
    assert titles(controller.jobs) == ["J3", "J2"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_drag_can_be_cancelled(controller, five_jobs):
    await controller.refresh()

    intent = controller.begin_drag(five_jobs[1].id)
    assert intent.from_order == 1
    assert controller.state is ReorderState.DRAGGING

    controller.cancel_drag()
    assert controller.state is ReorderState.IDLE
    assert controller.intent is None


@pytest.mark.db
@pytest.mark.asyncio
async def test_moves_are_refused_unless_sorted_by_order(api, notifier, five_jobs, titles_by_order, monkeypatch):
    controller = JobReorderController(api, JobQuery(sort="createdAt"), notifier)
    await controller.refresh()
    before = controller.jobs

    async def must_not_call(*args):
        raise AssertionError("reorder should not be sent")

    monkeypatch.setattr(api, "reorder_job", must_not_call)

    with pytest.raises(ValidationError):
        await controller.move_record(five_jobs[0].id, 3)
    with pytest.raises(ValidationError):
        controller.begin_drag(five_jobs[0].id)

    assert controller.jobs == before
    assert controller.state is ReorderState.IDLE
    assert notifier.errors == ["Jobs can only be reordered when sorted by board order"]
    assert await titles_by_order() == ["J0", "J1", "J2", "J3", "J4"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_cancelled_move_releases_the_board(controller, api, five_jobs, monkeypatch):
    await controller.refresh()
    before = controller.jobs
    real_reorder = api.reorder_job

    async def hang(job_id, from_order, to_order):
        await asyncio.sleep(10)

    monkeypatch.setattr(api, "reorder_job", hang)

    task = asyncio.create_task(controller.move_record(five_jobs[0].id, 2))
    await asyncio.sleep(0)
    assert controller.state is ReorderState.COMMITTING

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert controller.state is ReorderState.IDLE
    assert controller.intent is None
    assert controller.jobs == before

    monkeypatch.setattr(api, "reorder_job", real_reorder)
    outcome = await controller.move_record(five_jobs[4].id, 0)

    assert outcome.succeeded
    assert titles(controller.jobs) == ["J4", "J0", "J1", "J2", "J3"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_filtered_page_is_reread_after_move(api, notifier, five_jobs, job_service):
    await job_service.update_job(five_jobs[2].id, JobUpdate(status="archived"))
    controller = JobReorderController(api, JobQuery(status="active"), notifier)
    await controller.refresh()
    assert titles(controller.jobs) == ["J0", "J1", "J3", "J4"]

    outcome = await controller.move_record(five_jobs[1].id, 2)

    assert outcome.succeeded
    assert controller.state is ReorderState.SETTLED
    assert titles(controller.jobs) == ["J0", "J3", "J1", "J4"]
    assert [job.order for job in controller.jobs] == [0, 2, 3, 4]
    stored = await job_service.order_snapshot()
    assert {job.id: job.order for job in controller.jobs} == {job.id: stored[job.id] for job in controller.jobs}
