"""
Health router.

Reads straight from the database, bypassing the latency/failure harness, so
a health check never sees injected faults.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError

from app.db.session import session_scope
from app.repositories.job_repository import JobRepository

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def migration_head() -> Optional[str]:
    """Newest revision under alembic/versions, or None outside a checkout."""
    ini_path = PROJECT_ROOT / "alembic.ini"
    if not ini_path.exists():
        return None
    config = Config(str(ini_path))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


async def applied_migration(session_maker) -> Optional[str]:
    try:
        async with session_scope(session_maker) as db:
            result = await db.execute(text("SELECT version_num FROM alembic_version"))
            return result.scalar_one_or_none()
    except (OperationalError, ProgrammingError):
        # No alembic_version table: schema was created from metadata.
        return None


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Report database reachability and whether the jobs board is consistent.

    ``board_ok`` is true when the stored positions are exactly 0..N-1.
    ``migration`` is null for databases created from metadata.
    """
    state = request.app.state
    report: Dict[str, Any] = {
        "api_ok": True,
        "db_ok": False,
        "board_ok": False,
        "jobs": None,
        "fault_injection": type(state.harness.policy).__name__,
        "migration": None,
        "migration_head": migration_head(),
    }

    try:
        async with session_scope(state.session_maker) as db:
            orders = await JobRepository(db).order_map()
    except SQLAlchemyError:
        return report

    report["db_ok"] = True
    report["jobs"] = len(orders)
    report["board_ok"] = sorted(orders.values()) == list(range(len(orders)))

    report["migration"] = await applied_migration(state.session_maker)
    return report
