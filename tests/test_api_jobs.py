"""HTTP tests for /api/jobs and the shared error body."""

import pytest


@pytest.mark.db
@pytest.mark.asyncio
async def test_list_jobs_uses_camel_case_page(http_client, five_jobs):
    response = await http_client.get("/api/jobs", params={"pageSize": 2, "page": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    assert body["pageSize"] == 2
    assert body["totalPages"] == 3
    assert [job["title"] for job in body["items"]] == ["J2", "J3"]
    assert "createdAt" in body["items"][0]


@pytest.mark.db
@pytest.mark.asyncio
async def test_reorder_endpoint_moves_job(http_client, five_jobs):
    response = await http_client.patch(
        f"/api/jobs/{five_jobs[1].id}/reorder",
        json={"fromOrder": 1, "toOrder": 3},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}

    listing = (await http_client.get("/api/jobs")).json()
    assert [job["title"] for job in listing["items"]] == ["J0", "J2", "J3", "J1", "J4"]
    assert [job["order"] for job in listing["items"]] == [0, 1, 2, 3, 4]


@pytest.mark.db
@pytest.mark.asyncio
async def test_injected_reorder_failure_is_503(http_client, five_jobs, fault_policy):
    fault_policy.fail_next()

    response = await http_client.patch(
        f"/api/jobs/{five_jobs[1].id}/reorder",
        json={"fromOrder": 1, "toOrder": 3},
    )

    assert response.status_code == 503
    assert response.json() == {
        "error": "Reorder failed. Rolling back changes.",
        "code": "transient_failure",
    }

    listing = (await http_client.get("/api/jobs")).json()
    assert [job["title"] for job in listing["items"]] == ["J0", "J1", "J2", "J3", "J4"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_unknown_job_is_404(http_client):
    response = await http_client.get("/api/jobs/job-nope")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


@pytest.mark.db
@pytest.mark.asyncio
async def test_reorder_body_is_validated(http_client, five_jobs):
    response = await http_client.patch(
        f"/api/jobs/{five_jobs[0].id}/reorder",
        json={"fromOrder": 0, "toOrder": -1},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert "toOrder" in body["error"]


@pytest.mark.db
@pytest.mark.asyncio
async def test_order_cannot_be_patched(http_client, five_jobs):
    response = await http_client.patch(f"/api/jobs/{five_jobs[0].id}", json={"order": 3})

    assert response.status_code == 422
    listing = (await http_client.get("/api/jobs")).json()
    assert listing["items"][0]["id"] == five_jobs[0].id


@pytest.mark.db
@pytest.mark.asyncio
async def test_create_job_returns_201(http_client, five_jobs):
    response = await http_client.post(
        "/api/jobs",
        json={"title": "Data Scientist", "tags": ["Remote"], "department": "Engineering"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["order"] == 5
    assert body["slug"] == "data-scientist"
    assert body["status"] == "active"


@pytest.mark.db
@pytest.mark.asyncio
async def test_duplicate_slug_is_422(http_client):
    first = await http_client.post("/api/jobs", json={"title": "A", "slug": "same"})
    second = await http_client.post("/api/jobs", json={"title": "B", "slug": "same"})

    assert first.status_code == 201
    assert second.status_code == 422
    assert second.json()["error"] == "Slug must be unique"


@pytest.mark.db
@pytest.mark.asyncio
async def test_health_reports_policy(http_client):
    response = await http_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    assert body["board_ok"] is True
    assert body["jobs"] == 0
    assert body["fault_injection"] == "ScriptedFaultPolicy"
    assert body["migration"] is None
