"""
Demo data for the jobs board.

Generates 25 jobs (positions 0..24), 1000 candidates spread over them and
an assessment for the first three jobs. Seeding only runs on an empty
jobs table.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import session_scope
from app.models.assessment import Assessment
from app.models.candidate import Candidate
from app.models.candidate_timeline_event import CandidateTimelineEvent
from app.models.job import Job
from app.schemas.candidate import CandidateStage
from app.utils.slug import slugify
from app.utils.time import days_before, utc_now

logger = logging.getLogger(__name__)

DEPARTMENTS = ["Engineering", "Product", "Design", "Marketing", "Sales", "Operations"]
LOCATIONS = ["Remote", "New York, NY", "San Francisco, CA", "London, UK", "Berlin, Germany"]
FIRST_NAMES = [
    "Emma", "Liam", "Olivia", "Noah", "Ava", "Ethan", "Sophia", "Mason", "Isabella", "William",
    "Mia", "James", "Charlotte", "Benjamin", "Amelia", "Lucas", "Harper", "Henry", "Evelyn", "Alexander",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
]
JOB_TITLES = [
    "Senior Software Engineer", "Product Manager", "UX Designer", "Frontend Developer", "Backend Engineer",
    "DevOps Engineer", "Data Scientist", "Marketing Manager", "Sales Representative", "Account Executive",
    "Customer Success Manager", "Technical Writer", "QA Engineer", "Security Engineer", "Mobile Developer",
    "Full Stack Developer", "UI Designer", "Product Designer", "Engineering Manager", "VP of Engineering",
]
TAGS = [
    "Full-time", "Part-time", "Contract", "Remote", "Hybrid", "On-site", "Senior",
    "Mid-level", "Junior", "Leadership", "Technical", "Creative", "Urgent",
]
QUESTION_TYPES = ["single-choice", "multi-choice", "short-text", "long-text", "numeric", "file-upload"]
CHOICE_TYPES = ("single-choice", "multi-choice")

DAY_SECONDS = 24 * 60 * 60


def generate_jobs(count: int, rng: random.Random) -> List[Dict[str, Any]]:
    now = utc_now()
    jobs = []
    for i in range(count):
        title = rng.choice(JOB_TITLES)
        tags = list(dict.fromkeys([rng.choice(TAGS), rng.choice(TAGS)]))
        jobs.append(
            {
                "id": f"job-{i + 1}",
                "title": title,
                "slug": f"{slugify(title)}-{i}",
                "status": "active" if rng.random() > 0.3 else "archived",
                "tags": tags,
                "order": i,
                "department": rng.choice(DEPARTMENTS),
                "location": rng.choice(LOCATIONS),
                "description": (
                    f"We are looking for a talented {title} to join our team. This role offers exciting "
                    "opportunities to work on cutting-edge projects and make a real impact."
                ),
                "created_at": days_before(rng.random() * 90, now),
            }
        )
    return jobs


def generate_candidates(job_ids: List[str], count: int, rng: random.Random) -> List[Dict[str, Any]]:
    now = utc_now()
    stages = list(CandidateStage)
    candidates = []
    for i in range(count):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        candidates.append(
            {
                "id": f"candidate-{i + 1}",
                "name": f"{first} {last}",
                "email": f"{first.lower()}.{last.lower()}{i}@example.com",
                "stage": rng.choice(stages).value,
                "job_id": rng.choice(job_ids),
                "applied_at": days_before(rng.random() * 60, now),
                "phone": f"+1 (555) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
                "resume": f"https://example.com/resumes/{i + 1}.pdf",
            }
        )
    return candidates


def history_for(candidate: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Timeline walking the pipeline up to the candidate's current stage, one week apart."""
    stages = list(CandidateStage)
    current = CandidateStage(candidate["stage"])
    events = [
        {
            "candidate_id": candidate["id"],
            "type": "stage_change",
            "to_stage": CandidateStage.APPLIED.value,
            "note": "Application received",
            "timestamp": candidate["applied_at"],
        }
    ]
    for step in range(1, current.rank + 1):
        events.append(
            {
                "candidate_id": candidate["id"],
                "type": "stage_change",
                "from_stage": stages[step - 1].value,
                "to_stage": stages[step].value,
                "note": f"Moved to {stages[step].label} stage",
                "timestamp": days_before(-7 * step, candidate["applied_at"]),
            }
        )
    return events


def generate_assessment(job: Dict[str, Any], index: int) -> Dict[str, Any]:
    def question(section: int, q: int, qtype: str, text: str, required: bool, options: List[str]):
        data: Dict[str, Any] = {
            "id": f"q-{index}-{section}-{q}",
            "type": qtype,
            "text": text,
            "required": required,
            "order": q,
        }
        if qtype in CHOICE_TYPES:
            data["options"] = options
        if qtype == "numeric":
            data["validation"] = {"min": 0, "max": 100}
        return data

    technical = [
        question(1, q, QUESTION_TYPES[q % 6], f"Question {q + 1} for {job['title']}", True,
                 ["Option A", "Option B", "Option C", "Option D"])
        for q in range(5)
    ]
    experience = [
        question(2, q, QUESTION_TYPES[(q + 2) % 6], f"Experience question {q + 1}", q < 3,
                 ["Yes", "No", "Maybe", "Not Applicable"])
        for q in range(6)
    ]
    return {
        "id": f"assessment-{index + 1}",
        "job_id": job["id"],
        "title": f"Assessment for {job['title']}",
        "sections": [
            {
                "id": f"section-{index}-1",
                "title": "Technical Skills",
                "description": "Assess candidate's technical knowledge",
                "order": 0,
                "questions": technical,
            },
            {
                "id": f"section-{index}-2",
                "title": "Experience & Background",
                "description": "Learn about candidate's experience",
                "order": 1,
                "questions": experience,
            },
        ],
    }


async def seed_database(
    session_maker: async_sessionmaker[AsyncSession],
    job_count: int = 25,
    candidate_count: int = 1000,
    assessment_count: int = 3,
    seed: Optional[int] = None,
) -> bool:
    """Populate an empty database. Returns False when jobs already exist."""
    rng = random.Random(seed)

    async with session_scope(session_maker) as db:
        existing = (await db.execute(select(func.count()).select_from(Job))).scalar_one()
        if existing:
            return False

        logger.info("Seeding database...")
        jobs = generate_jobs(job_count, rng)
        db.add_all(Job(**job) for job in jobs)
        await db.flush()

        candidates = generate_candidates([job["id"] for job in jobs], candidate_count, rng) if jobs else []
        db.add_all(Candidate(**candidate) for candidate in candidates)
        await db.flush()

        db.add_all(
            CandidateTimelineEvent(**event)
            for candidate in candidates
            for event in history_for(candidate)
        )
        db.add_all(
            Assessment(**generate_assessment(job, index))
            for index, job in enumerate(jobs[:assessment_count])
        )

    logger.info("Seeded %s jobs, %s candidates", len(jobs), len(candidates))
    return True
