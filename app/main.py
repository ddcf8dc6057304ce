"""
Main FastAPI application.

This is the entry point for the API server. create_app() builds the
engine, session factory, fault-injection harness and services explicitly
and hangs them on ``app.state``; nothing is shared through module globals.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings, settings as default_settings
from app.core.logging import configure_logging
from app.db.seed import seed_database
from app.db.session import create_all, create_engine_from_settings, create_session_maker
from app.errors import AppError, app_error_handler, request_validation_error_handler
from app.routers import assessments, candidates, health, jobs
from app.services.assessment_service import AssessmentService
from app.services.candidate_service import CandidateService
from app.services.fault_injection import FaultPolicy, LatencyFailureHarness, policy_from_settings
from app.services.job_service import JobService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    fault_policy: Optional[FaultPolicy] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass a deterministic ``fault_policy`` and their own ``engine``;
    the server uses the policy described by the settings.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    engine = engine or create_engine_from_settings(settings)
    session_maker = create_session_maker(engine)
    harness = LatencyFailureHarness(fault_policy or policy_from_settings(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup: create missing tables and seed demo data.
        Shutdown: dispose of the connection pool.
        """
        logger.info("Starting %s (faults: %s)", settings.APP_NAME, type(harness.policy).__name__)
        await create_all(engine)
        if settings.SEED_ON_STARTUP:
            await seed_database(session_maker)

        yield  # The server runs while we're "yielded" here

        logger.info("Shutting down %s", settings.APP_NAME)
        await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Jobs board and candidate pipeline API with simulated network faults",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = session_maker
    app.state.harness = harness
    app.state.job_service = JobService(session_maker, harness)
    app.state.candidate_service = CandidateService(session_maker, harness)
    app.state.assessment_service = AssessmentService(session_maker, harness)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(jobs.router)
    app.include_router(candidates.router)
    app.include_router(assessments.router)

    return app


app = create_app()
