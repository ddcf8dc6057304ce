#!/usr/bin/env python3
"""
Reorder soak test against a running API.

Drives JobReorderController through random moves on one page while the
server injects latency and failures, and checks after every move that the
cached page agrees with a fresh fetch and that the whole board still holds
positions 0..N-1.

Usage:
    uvicorn app.main:app &
    python scripts/soak_reorders.py --base-url http://localhost:8000 --moves 50
"""

import argparse
import asyncio
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.client.api_client import AtsApiClient, JobQuery
from app.client.notifications import NotificationLog
from app.client.reorder_controller import JobReorderController
from app.core.config import settings
from app.core.logging import configure_logging
from app.errors import AppError


async def board_orders(client: AtsApiClient):
    """Every job's position, read page by page."""
    orders = {}
    page = 1
    while True:
        result = await client.list_jobs(JobQuery(page=page, page_size=settings.MAX_PAGE_SIZE))
        orders.update({job.id: job.order for job in result.items})
        if page >= result.total_pages:
            return orders
        page += 1


async def soak(base_url: str, moves: int, page_size: int, seed: int) -> int:
    rng = random.Random(seed)
    notifier = NotificationLog()
    failures = 0

    async with AtsApiClient.connect(base_url, timeout=settings.CLIENT_TIMEOUT_SECONDS * 2) as client:
        controller = JobReorderController(
            client,
            JobQuery(page_size=page_size),
            notifier,
            timeout=settings.CLIENT_TIMEOUT_SECONDS,
        )
        await controller.refresh()
        if len(controller.jobs) < 2:
            print("Need at least two jobs on the first page; run scripts/seed_demo_data.py")
            return 1

        for step in range(1, moves + 1):
            job = rng.choice(controller.jobs)
            target = rng.randrange(len(controller.jobs))
            outcome = await controller.move_record(job.id, target)
            status = "ok" if outcome.succeeded else f"failed ({outcome.error})"

            try:
                fresh = await client.list_jobs(controller.query)
                orders = await board_orders(client)
            except AppError as exc:
                print(f"{step:>3}: {status}; verification read failed: {exc}")
                continue

            cached = [(j.id, j.order) for j in controller.jobs]
            expected = [(j.id, j.order) for j in fresh.items]
            dense = sorted(orders.values()) == list(range(len(orders)))
            # A failed resync leaves the last confirmed page on screen, which may lag.
            stale_allowed = not (outcome.succeeded or outcome.resynced)
            if (cached != expected and not stale_allowed) or not dense:
                failures += 1
                print(f"{step:>3}: {status}; MISMATCH cached={cached} server={expected} dense={dense}")
            else:
                print(f"{step:>3}: {status}")

            # The next gesture starts from what the server holds.
            controller.cache.replace(fresh)

    print(f"\n{moves} moves, {len(notifier.errors)} error notifications, {failures} mismatches")
    return 1 if failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Random reorder soak test")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--moves", type=int, default=50)
    parser.add_argument("--page-size", type=int, default=settings.DEFAULT_JOBS_PAGE_SIZE)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(soak(args.base_url, args.moves, args.page_size, args.seed)))
