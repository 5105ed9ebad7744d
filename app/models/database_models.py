"""SQLAlchemy ORM models for practice tracking."""
from datetime import date as date_type, datetime
from sqlalchemy import Integer, Date, DateTime, String, Boolean, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


PROFILE_SINGLETON_ID = 1


class PracticeSession(Base):
    """A single deliberate-practice session."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Required
    micro_objective: Mapped[str] = mapped_column(String(500), nullable=False)
    technical_focus: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    duration_min: Mapped[int] = mapped_column(Integer, nullable=False)

    # Performance metrics
    bpm_target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bpm_achieved: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quality_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-5 stars
    rpe: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Perceived exertion 1-10

    # Reflection
    mindset_checklist: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    reflection: Mapped[str | None] = mapped_column(Text, nullable=True)


class UserProfile(Base):
    """Guitarist profile used to personalise AI analysis (single row)."""

    __tablename__ = "user_profile"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=PROFILE_SINGLETON_ID)

    level: Mapped[str] = mapped_column(String(20), nullable=False)
    experience_value: Mapped[int] = mapped_column(Integer, nullable=False)
    experience_unit: Mapped[str] = mapped_column(String(10), nullable=False)

    main_goal: Mapped[str] = mapped_column(String(500), nullable=False)
    current_challenge: Mapped[str | None] = mapped_column(Text, nullable=True)
    ideal_practice_frequency: Mapped[int | None] = mapped_column(Integer, nullable=True)  # days per week
    priority_techniques: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_context: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class DailyHabit(Base):
    """Daily routine checklist (warm-up, chord changes, lesson)."""

    __tablename__ = "daily_habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[date_type] = mapped_column(Date, unique=True, nullable=False)

    warmup_done: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    warmup_duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)

    chords_done: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    chords_duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    chords_bpm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    chords_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    class_done: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    class_duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
