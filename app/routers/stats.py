"""Practice statistics endpoints."""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.schemas import TechnicalFocus
from app.services.insights import generate_weekly_reflection
from app.services.stats_service import StatsService


router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("")
async def get_stats(db: Session = Depends(get_db)) -> dict:
    """
    Streak, last-7-days and all-time totals.

    Returns:
        ``{success, data: {stats: {currentStreak, weeklyMinutes,
        weeklyAverageQuality, weeklySessionCount, totalSessions, totalMinutes}}}``
    """
    stats = StatsService(db).get_stats()
    return {"success": True, "data": {"stats": stats.model_dump(mode="json", by_alias=True)}}


@router.get("/bpm-evolution")
async def get_bpm_evolution(
    technical_focus: TechnicalFocus | None = Query(default=None, alias="technicalFocus"),
    date_from: datetime | None = Query(default=None, alias="dateFrom"),
    date_to: datetime | None = Query(default=None, alias="dateTo"),
    db: Session = Depends(get_db),
) -> dict:
    """BPM target/achieved per session, oldest first."""

    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="dateFrom must be before or equal to dateTo")

    points = StatsService(db).bpm_evolution(
        technical_focus.value if technical_focus else None,
        date_from,
        date_to,
    )
    return {
        "success": True,
        "data": {"points": [p.model_dump(mode="json", by_alias=True) for p in points]},
    }


@router.get("/kaizen")
async def get_kaizen_suggestion(db: Session = Depends(get_db)) -> dict:
    """Micro-experiment suggested from the ten most recent sessions."""
    return {"success": True, "data": {"suggestion": StatsService(db).kaizen_suggestion()}}


@router.get("/weekly-reflection")
async def get_weekly_reflection() -> dict:
    return {"success": True, "data": generate_weekly_reflection()}
