"""
HTTP client for the ATS API.

Wraps an httpx.AsyncClient and turns error responses back into the error
classes from app.errors, using the status code only. Timeouts and transport
failures count as transient.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from app.errors import TransientServiceError, error_for_status
from app.schemas.assessment import AssessmentRead, AssessmentSubmit, AssessmentUpsert, SubmissionResult
from app.schemas.base import Page
from app.schemas.candidate import CandidateCreate, CandidateRead, CandidateUpdate, TimelineEventRead
from app.schemas.job import JobCreate, JobRead, JobReorderRequest, JobUpdate

logger = logging.getLogger(__name__)


@dataclass
class JobQuery:
    """Parameters of one jobs page."""

    search: Optional[str] = None
    status: Optional[str] = None
    page: int = 1
    page_size: int = 10
    sort: str = "order"

    def params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": self.page, "pageSize": self.page_size, "sort": self.sort}
        if self.search:
            params["search"] = self.search
        if self.status and self.status != "all":
            params["status"] = self.status
        return params


@dataclass
class CandidateQuery:
    """Parameters of one candidates page."""

    search: Optional[str] = None
    stage: Optional[str] = None
    job_id: Optional[str] = None
    page: int = 1
    page_size: int = 50

    def params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": self.page, "pageSize": self.page_size}
        if self.search:
            params["search"] = self.search
        if self.stage and self.stage != "all":
            params["stage"] = self.stage
        if self.job_id:
            params["jobId"] = self.job_id
        return params


def _body(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)


class AtsApiClient:
    """Typed async client for the jobs, candidates and assessments endpoints."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def connect(cls, base_url: str, timeout: float = 5.0) -> "AtsApiClient":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AtsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransientServiceError(f"Request to {url} timed out") from exc
        except httpx.TransportError as exc:
            raise TransientServiceError(f"Could not reach server: {exc}") from exc

        if response.is_error:
            message = f"Request failed with status {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("error"), str):
                message = body["error"]
            logger.debug("%s %s -> %s: %s", method, url, response.status_code, message)
            raise error_for_status(response.status_code, message)

        return response.json()

    # Jobs

    async def list_jobs(self, query: Optional[JobQuery] = None) -> Page[JobRead]:
        query = query or JobQuery()
        data = await self._request("GET", "/api/jobs", params=query.params())
        return Page[JobRead].model_validate(data)

    async def get_job(self, job_id: str) -> JobRead:
        return JobRead.model_validate(await self._request("GET", f"/api/jobs/{job_id}"))

    async def create_job(self, data: JobCreate) -> JobRead:
        return JobRead.model_validate(await self._request("POST", "/api/jobs", json=_body(data)))

    async def update_job(self, job_id: str, data: JobUpdate) -> JobRead:
        return JobRead.model_validate(await self._request("PATCH", f"/api/jobs/{job_id}", json=_body(data)))

    async def reorder_job(self, job_id: str, from_order: int, to_order: int) -> None:
        request = JobReorderRequest(from_order=from_order, to_order=to_order)
        await self._request("PATCH", f"/api/jobs/{job_id}/reorder", json=_body(request))

    # Candidates

    async def list_candidates(self, query: Optional[CandidateQuery] = None) -> Page[CandidateRead]:
        query = query or CandidateQuery()
        data = await self._request("GET", "/api/candidates", params=query.params())
        return Page[CandidateRead].model_validate(data)

    async def get_candidate(self, candidate_id: str) -> CandidateRead:
        return CandidateRead.model_validate(await self._request("GET", f"/api/candidates/{candidate_id}"))

    async def create_candidate(self, data: CandidateCreate) -> CandidateRead:
        return CandidateRead.model_validate(await self._request("POST", "/api/candidates", json=_body(data)))

    async def update_candidate(self, candidate_id: str, data: CandidateUpdate) -> CandidateRead:
        payload = await self._request("PATCH", f"/api/candidates/{candidate_id}", json=_body(data))
        return CandidateRead.model_validate(payload)

    async def get_timeline(self, candidate_id: str) -> List[TimelineEventRead]:
        data = await self._request("GET", f"/api/candidates/{candidate_id}/timeline")
        return [TimelineEventRead.model_validate(item) for item in data]

    # Assessments

    async def get_assessment(self, job_id: str) -> Optional[AssessmentRead]:
        data = await self._request("GET", f"/api/assessments/{job_id}")
        return AssessmentRead.model_validate(data) if data is not None else None

    async def save_assessment(self, job_id: str, data: AssessmentUpsert) -> AssessmentRead:
        return AssessmentRead.model_validate(
            await self._request("PUT", f"/api/assessments/{job_id}", json=_body(data))
        )

    async def submit_assessment(self, job_id: str, data: AssessmentSubmit) -> SubmissionResult:
        return SubmissionResult.model_validate(
            await self._request("POST", f"/api/assessments/{job_id}/submit", json=_body(data))
        )
