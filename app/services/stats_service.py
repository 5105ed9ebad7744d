"""Aggregate statistics over practice sessions and daily habits."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.database_models import DailyHabit, PracticeSession
from app.models.schemas import BPMDataPoint, MonthHabitStats, SessionRead, SessionStats
from app.services.insights import generate_kaizen_suggestion


WEEK_DAYS = 7
KAIZEN_WINDOW = 10
STREAK_MILESTONES = (7, 30)
HOUR_MILESTONES = (10, 50)


def _utc_today() -> date:
    return datetime.utcnow().date()


def calculate_streak(practice_dates: Iterable[date], today: date | None = None) -> int:
    """
    Count consecutive practice days ending today.

    Future dates are ignored; a day without practice (including today)
    ends the streak.
    """
    expected = today or _utc_today()
    streak = 0
    for day in sorted(set(practice_dates), reverse=True):
        if day > expected:
            continue
        if day == expected:
            streak += 1
            expected -= timedelta(days=1)
        else:
            break
    return streak


def calculate_habit_streak(rows: Sequence[DailyHabit], today: date | None = None) -> int:
    """Most-recent-first run of days with all three habits done."""

    today = today or _utc_today()
    streak = 0
    for row in sorted(rows, key=lambda r: r.date, reverse=True):
        if row.date > today:
            continue
        if row.warmup_done and row.chords_done and row.class_done:
            streak += 1
        else:
            break
    return streak


def month_habit_stats(rows: Sequence[DailyHabit], today: date | None = None) -> MonthHabitStats:
    return MonthHabitStats(
        warmup_count=sum(1 for r in rows if r.warmup_done),
        chords_count=sum(1 for r in rows if r.chords_done),
        class_count=sum(1 for r in rows if r.class_done),
        total_days=len(rows),
        current_streak=calculate_habit_streak(rows, today),
    )


class StatsService:
    """Dashboard statistics backed by the sessions table."""

    def __init__(self, db: Session | None = None):
        self.db = db or SessionLocal()

    def _practice_dates(self) -> list[date]:
        rows = self.db.query(PracticeSession.created_at).all()
        return [created_at.date() for (created_at,) in rows]

    def get_stats(self, today: date | None = None) -> SessionStats:
        """
        Streak, last-7-days and all-time totals.

        Returns:
            SessionStats with ``weekly_average_quality`` rounded to one
            decimal (``None`` when no rated session this week).
        """
        week_start = datetime.utcnow() - timedelta(days=WEEK_DAYS)

        weekly_count, weekly_minutes, weekly_quality = (
            self.db.query(
                func.count(PracticeSession.id),
                func.coalesce(func.sum(PracticeSession.duration_min), 0),
                func.avg(PracticeSession.quality_rating),
            )
            .filter(PracticeSession.created_at >= week_start)
            .one()
        )
        total_count, total_minutes = self.db.query(
            func.count(PracticeSession.id),
            func.coalesce(func.sum(PracticeSession.duration_min), 0),
        ).one()

        return SessionStats(
            current_streak=calculate_streak(self._practice_dates(), today),
            weekly_minutes=int(weekly_minutes),
            weekly_average_quality=round(float(weekly_quality), 1) if weekly_quality is not None else None,
            weekly_session_count=weekly_count,
            total_sessions=total_count,
            total_minutes=int(total_minutes),
        )

    def bpm_evolution(
        self,
        technical_focus: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[BPMDataPoint]:
        """Sessions with any BPM value, oldest first, for charting."""

        query = self.db.query(PracticeSession).filter(
            (PracticeSession.bpm_target.isnot(None)) | (PracticeSession.bpm_achieved.isnot(None))
        )
        if technical_focus:
            query = query.filter(PracticeSession.technical_focus == technical_focus)
        if date_from:
            query = query.filter(PracticeSession.created_at >= date_from)
        if date_to:
            query = query.filter(PracticeSession.created_at <= date_to)

        rows = query.order_by(PracticeSession.created_at.asc(), PracticeSession.id.asc()).all()
        return [
            BPMDataPoint(
                date=row.created_at,
                target=row.bpm_target,
                achieved=row.bpm_achieved,
                micro_objective=row.micro_objective,
            )
            for row in rows
        ]

    def kaizen_suggestion(self, window: int = KAIZEN_WINDOW) -> str:
        rows = (
            self.db.query(PracticeSession)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
            .limit(window)
            .all()
        )
        return generate_kaizen_suggestion([SessionRead.model_validate(r) for r in rows])

    def detect_milestone(self, session: PracticeSession, today: date | None = None) -> str | None:
        """
        Milestone reached by saving ``session``, if any.

        Streak milestones fire only on the first session of the day; hour
        milestones fire when the new session crosses the threshold.
        """
        total_count, total_minutes = self.db.query(
            func.count(PracticeSession.id),
            func.coalesce(func.sum(PracticeSession.duration_min), 0),
        ).one()
        if total_count == 1:
            return "first_session"

        dates = self._practice_dates()
        session_day = session.created_at.date()
        if dates.count(session_day) == 1:
            streak = calculate_streak(dates, today or session_day)
            for days in reversed(STREAK_MILESTONES):
                if streak == days:
                    return f"streak_{days}"

        previous_minutes = int(total_minutes) - session.duration_min
        for hours in reversed(HOUR_MILESTONES):
            if previous_minutes < hours * 60 <= int(total_minutes):
                return f"total_hours_{hours}"
        return None
