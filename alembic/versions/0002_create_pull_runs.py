"""create pull_runs table

Revision ID: 0002_create_pull_runs
Revises: 0001_create_vehicle_positions
Create Date: 2025-03-09 14:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0002_create_pull_runs"
down_revision = "0001_create_vehicle_positions"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "pull_runs",
        sa.Column("run_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("records_parsed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("records_skipped", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("timestamp_anomalies", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("records_upserted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("records_deactivated", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("run_id"),
    )
    op.create_index("ix_pull_runs_started_at", "pull_runs", ["started_at"])


def downgrade() -> None:
    op.drop_index("ix_pull_runs_started_at", "pull_runs")
    op.drop_table("pull_runs")
