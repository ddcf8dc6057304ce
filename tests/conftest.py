"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under tmp_path, a fresh application
built with a ScriptedFaultPolicy (no latency, failures only when a test
asks for them) and an httpx client talking to it in-process.
"""

from typing import List

import httpx
import pytest
import pytest_asyncio

from app.client.api_client import AtsApiClient
from app.core.config import Settings
from app.db.session import create_all, create_engine_from_settings
from app.main import create_app
from app.schemas.job import JobCreate, JobRead
from app.services.fault_injection import ScriptedFaultPolicy


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no database")
    config.addinivalue_line("markers", "db: uses a temporary SQLite database")


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SEED_ON_STARTUP=False,
        SIMULATE_FAULTS=False,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def fault_policy() -> ScriptedFaultPolicy:
    return ScriptedFaultPolicy()


@pytest_asyncio.fixture
async def engine(app_settings):
    engine = create_engine_from_settings(app_settings)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def app(app_settings, fault_policy, engine):
    return create_app(app_settings, fault_policy=fault_policy, engine=engine)


@pytest.fixture
def job_service(app):
    return app.state.job_service


@pytest.fixture
def candidate_service(app):
    return app.state.candidate_service


@pytest.fixture
def assessment_service(app):
    return app.state.assessment_service


@pytest_asyncio.fixture
async def http_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api(http_client):
    return AtsApiClient(http_client)


@pytest.fixture
def make_jobs(job_service):
    """Create ``count`` jobs titled J0..J{count-1}; they land at orders 0..count-1."""

    async def make(count: int) -> List[JobRead]:
        return [await job_service.create_job(JobCreate(title=f"J{i}")) for i in range(count)]

    return make


@pytest_asyncio.fixture
async def five_jobs(make_jobs) -> List[JobRead]:
    return await make_jobs(5)


@pytest.fixture
def titles_by_order(job_service):
    """Titles of every job, sorted by stored position."""

    async def read() -> List[str]:
        page = await job_service.list_jobs(page_size=200)
        return [job.title for job in page.items]

    return read
