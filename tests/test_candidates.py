"""Candidates: stage updates, timeline and the HTTP surface."""

import pytest
from sqlalchemy.exc import InvalidRequestError

from app.db.session import session_scope
from app.errors import NotFoundError, TransientServiceError, ValidationError
from app.repositories.candidate_repository import CandidateRepository
from app.schemas.candidate import CandidateCreate, CandidateStage, CandidateUpdate


@pytest.mark.db
@pytest.mark.asyncio
async def test_stage_change_is_recorded_on_timeline(candidate_service):
    candidate = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    await candidate_service.update_candidate(candidate.id, CandidateUpdate(stage=CandidateStage.SCREEN))
    await candidate_service.update_candidate(candidate.id, CandidateUpdate(stage=CandidateStage.TECH))

    events = await candidate_service.get_timeline(candidate.id)
    assert [event.to_stage for event in events] == [
        CandidateStage.APPLIED,
        CandidateStage.SCREEN,
        CandidateStage.TECH,
    ]
    assert events[0].note == "Application received"
    assert events[-1].from_stage is CandidateStage.SCREEN
    assert events[-1].note == "Moved to Technical stage"


@pytest.mark.db
@pytest.mark.asyncio
async def test_failed_stage_write_changes_nothing(candidate_service, fault_policy):
    candidate = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))
    fault_policy.fail_next()

    with pytest.raises(TransientServiceError):
        await candidate_service.update_candidate(candidate.id, CandidateUpdate(stage=CandidateStage.OFFER))

    stored = await candidate_service.get_candidate(candidate.id)
    assert stored.stage is CandidateStage.APPLIED
    assert len(await candidate_service.get_timeline(candidate.id)) == 1


@pytest.mark.db
@pytest.mark.asyncio
async def test_non_stage_update_adds_no_event(candidate_service):
    candidate = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    updated = await candidate_service.update_candidate(candidate.id, CandidateUpdate(phone="+1 555 0100"))

    assert updated.phone == "+1 555 0100"
    assert len(await candidate_service.get_timeline(candidate.id)) == 1


@pytest.mark.db
@pytest.mark.asyncio
async def test_update_unknown_candidate(candidate_service):
    with pytest.raises(NotFoundError):
        await candidate_service.update_candidate("candidate-missing", CandidateUpdate(stage=CandidateStage.SCREEN))


@pytest.mark.db
@pytest.mark.asyncio
async def test_candidate_for_unknown_job_is_rejected(candidate_service):
    with pytest.raises(ValidationError):
        await candidate_service.create_candidate(
            CandidateCreate(name="Ada", email="ada@example.com", job_id="job-missing")
        )


@pytest.mark.db
@pytest.mark.asyncio
async def test_list_filters_by_stage_and_job(candidate_service, five_jobs):
    job_id = five_jobs[0].id
    await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com", job_id=job_id))
    await candidate_service.create_candidate(
        CandidateCreate(name="Grace", email="grace@example.com", stage=CandidateStage.HIRED)
    )

    hired = await candidate_service.list_candidates(stage="hired")
    assert [c.name for c in hired.items] == ["Grace"]

    for_job = await candidate_service.list_candidates(job_id=job_id)
    assert [c.name for c in for_job.items] == ["Ada"]

    searched = await candidate_service.list_candidates(search="GRACE@")
    assert searched.total == 1

    counts = await candidate_service.stage_counts()
    assert counts["applied"] == 1
    assert counts["hired"] == 1
    assert counts["offer"] == 0


@pytest.mark.db
@pytest.mark.asyncio
async def test_patch_stage_over_http(http_client, candidate_service):
    candidate = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    response = await http_client.patch(f"/api/candidates/{candidate.id}", json={"stage": "offer"})
    assert response.status_code == 200
    assert response.json()["stage"] == "offer"

    timeline = await http_client.get(f"/api/candidates/{candidate.id}/timeline")
    assert [event["toStage"] for event in timeline.json()] == ["applied", "offer"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_unknown_stage_is_422(http_client, candidate_service):
    candidate = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    response = await http_client.patch(f"/api/candidates/{candidate.id}", json={"stage": "interview"})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


@pytest.mark.db
@pytest.mark.asyncio
async def test_stage_counts_endpoint(http_client, candidate_service):
    await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    response = await http_client.get("/api/candidates/stage-counts")

    assert response.status_code == 200
    assert response.json() == {
        "applied": 1,
        "screen": 0,
        "tech": 0,
        "offer": 0,
        "hired": 0,
        "rejected": 0,
    }


@pytest.mark.db
@pytest.mark.asyncio
async def test_timeline_is_never_loaded_implicitly(app, candidate_service):
    created = await candidate_service.create_candidate(CandidateCreate(name="Ada", email="ada@example.com"))

    async with session_scope(app.state.session_maker) as session:
        candidate = await CandidateRepository(session).get_by_id(created.id)
        with pytest.raises(InvalidRequestError):
            candidate.timeline_events

        events = await CandidateRepository(session).list_events(created.id)
        assert [event.to_stage for event in events] == ["applied"]
