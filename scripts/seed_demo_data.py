"""
Seed demo data: 25 jobs, 1000 candidates and three assessments.

Creates missing tables first. Does nothing when the jobs table already has
rows.

Usage:
    python scripts/seed_demo_data.py [--jobs 25] [--candidates 1000] [--seed 42]
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.seed import seed_database
from app.db.session import create_all, create_engine_from_settings, create_session_maker


async def main(job_count: int, candidate_count: int, seed: int) -> bool:
    engine = create_engine_from_settings(settings)
    try:
        await create_all(engine)
        return await seed_database(
            create_session_maker(engine),
            job_count=job_count,
            candidate_count=candidate_count,
            seed=seed,
        )
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the ATS demo database")
    parser.add_argument("--jobs", type=int, default=25)
    parser.add_argument("--candidates", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    print(f"Seeding {settings.DATABASE_URL}...\n")
    if asyncio.run(main(args.jobs, args.candidates, args.seed)):
        print("\n[OK] Done.")
    else:
        print("\n[SKIP] Jobs already present; nothing seeded.")
