"""Daily habit checklist endpoints."""
from __future__ import annotations

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.database_models import DailyHabit
from app.models.schemas import (
    ChordsHabitEntry,
    DailyHabitsPayload,
    HabitEntry,
    HabitsMonthResponse,
)
from app.services.stats_service import month_habit_stats


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/habits", tags=["habits"])


def _to_payload(row: DailyHabit) -> DailyHabitsPayload:
    return DailyHabitsPayload(
        date=row.date,
        warmup=HabitEntry(done=row.warmup_done, duration_min=row.warmup_duration_min),
        chords=ChordsHabitEntry(
            done=row.chords_done,
            duration_min=row.chords_duration_min,
            bpm=row.chords_bpm,
            notes=row.chords_notes,
        ),
        lesson=HabitEntry(done=row.class_done, duration_min=row.class_duration_min),
    )


def _dump(payload: DailyHabitsPayload) -> dict:
    return payload.model_dump(mode="json", by_alias=True)


def _month_bounds(month: str) -> tuple[date, date]:
    start = datetime.strptime(month, "%Y-%m").date()
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


@router.get("")
async def get_daily_habits(
    day: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
) -> dict:
    """Habits for one day (default: today); an unchecked structure when nothing was saved."""

    day = day or datetime.utcnow().date()
    row = db.query(DailyHabit).filter(DailyHabit.date == day).first()
    payload = _to_payload(row) if row is not None else DailyHabitsPayload(date=day)
    return {"success": True, "data": _dump(payload)}


@router.post("")
async def save_daily_habits(payload: DailyHabitsPayload, db: Session = Depends(get_db)) -> dict:
    """Insert or overwrite the habits of ``payload.date``."""

    row = db.query(DailyHabit).filter(DailyHabit.date == payload.date).first()
    if row is None:
        row = DailyHabit(date=payload.date)
        db.add(row)

    row.warmup_done = payload.warmup.done
    row.warmup_duration_min = payload.warmup.duration_min
    row.chords_done = payload.chords.done
    row.chords_duration_min = payload.chords.duration_min
    row.chords_bpm = payload.chords.bpm
    row.chords_notes = payload.chords.notes
    row.class_done = payload.lesson.done
    row.class_duration_min = payload.lesson.duration_min

    db.commit()
    db.refresh(row)
    logger.info("Habits saved for %s", row.date.isoformat())
    return {"success": True, "data": _dump(_to_payload(row))}


@router.get("/month")
async def get_month_habits(
    month: str | None = Query(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    db: Session = Depends(get_db),
) -> dict:
    """
    Every saved day of a month, most recent first, with monthly counters.

    Args:
        month: ``YYYY-MM`` (default: current month)
    """
    month = month or datetime.utcnow().strftime("%Y-%m")
    start, end = _month_bounds(month)

    rows = (
        db.query(DailyHabit)
        .filter(DailyHabit.date >= start, DailyHabit.date < end)
        .order_by(DailyHabit.date.desc())
        .all()
    )

    response = HabitsMonthResponse(
        month=month,
        days=[_to_payload(row) for row in rows],
        stats=month_habit_stats(rows),
    )
    return {"success": True, "data": response.model_dump(mode="json", by_alias=True)}
