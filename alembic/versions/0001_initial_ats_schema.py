"""Initial ATS schema: jobs, candidates, timeline, assessments

Revision ID: 0001_initial_ats_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_ats_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "job",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'active'")),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("slug", name="uq_job_slug"),
    )
    op.create_index("ix_job_order", "job", ["order"])
    op.create_index("ix_job_status", "job", ["status"])

    op.create_table(
        "candidate",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("stage", sa.String(length=20), nullable=False, server_default=sa.text("'applied'")),
        sa.Column("job_id", sa.String(length=64), sa.ForeignKey("job.id"), nullable=True),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("resume", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_candidate_stage", "candidate", ["stage"])
    op.create_index("ix_candidate_job_id", "candidate", ["job_id"])
    op.create_index("ix_candidate_applied_at", "candidate", ["applied_at"])

    op.create_table(
        "candidate_timeline_event",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("candidate_id", sa.String(length=64), sa.ForeignKey("candidate.id"), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("from_stage", sa.String(length=20), nullable=True),
        sa.Column("to_stage", sa.String(length=20), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_timeline_candidate_ts", "candidate_timeline_event", ["candidate_id", "timestamp"])

    op.create_table(
        "assessment",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("job_id", sa.String(length=64), sa.ForeignKey("job.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("sections", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("job_id", name="uq_assessment_job_id"),
    )

    op.create_table(
        "assessment_submission",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("assessment_id", sa.String(length=64), sa.ForeignKey("assessment.id"), nullable=True),
        sa.Column("job_id", sa.String(length=64), sa.ForeignKey("job.id"), nullable=False),
        sa.Column("candidate_id", sa.String(length=64), sa.ForeignKey("candidate.id"), nullable=True),
        sa.Column("responses", sa.JSON(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("assessment_submission")
    op.drop_table("assessment")
    op.drop_index("ix_timeline_candidate_ts", table_name="candidate_timeline_event")
    op.drop_table("candidate_timeline_event")
    op.drop_index("ix_candidate_applied_at", table_name="candidate")
    op.drop_index("ix_candidate_job_id", table_name="candidate")
    op.drop_index("ix_candidate_stage", table_name="candidate")
    op.drop_table("candidate")
    op.drop_index("ix_job_status", table_name="job")
    op.drop_index("ix_job_order", table_name="job")
    op.drop_table("job")
