"""Initial practice coach schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20251019_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("micro_objective", sa.String(length=500), nullable=False),
        sa.Column("technical_focus", sa.String(length=20), nullable=False),
        sa.Column("duration_min", sa.Integer(), nullable=False),
        sa.Column("bpm_target", sa.Integer(), nullable=True),
        sa.Column("bpm_achieved", sa.Integer(), nullable=True),
        sa.Column("quality_rating", sa.Integer(), nullable=True),
        sa.Column("rpe", sa.Integer(), nullable=True),
        sa.Column("mindset_checklist", sa.JSON(), nullable=True),
        sa.Column("reflection", sa.Text(), nullable=True),
    )
    op.create_index("ix_sessions_created_at", "sessions", ["created_at"])
    op.create_index("ix_sessions_technical_focus", "sessions", ["technical_focus"])

    op.create_table(
        "user_profile",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("level", sa.String(length=20), nullable=False),
        sa.Column("experience_value", sa.Integer(), nullable=False),
        sa.Column("experience_unit", sa.String(length=10), nullable=False),
        sa.Column("main_goal", sa.String(length=500), nullable=False),
        sa.Column("current_challenge", sa.Text(), nullable=True),
        sa.Column("ideal_practice_frequency", sa.Integer(), nullable=True),
        sa.Column("priority_techniques", sa.Text(), nullable=True),
        sa.Column("additional_context", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "daily_habits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("warmup_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("warmup_duration_min", sa.Integer(), nullable=True),
        sa.Column("chords_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("chords_duration_min", sa.Integer(), nullable=True),
        sa.Column("chords_bpm", sa.Integer(), nullable=True),
        sa.Column("chords_notes", sa.Text(), nullable=True),
        sa.Column("class_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("class_duration_min", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("daily_habits")
    op.drop_table("user_profile")
    op.drop_index("ix_sessions_technical_focus", table_name="sessions")
    op.drop_index("ix_sessions_created_at", table_name="sessions")
    op.drop_table("sessions")
