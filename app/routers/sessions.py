"""Practice session CRUD endpoints."""
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.database_models import PracticeSession
from app.models.schemas import SessionCreate, SessionListResponse, SessionRead, TechnicalFocus
from app.services.insights import filter_objective_suggestions, generate_insight, generate_milestone_message
from app.services.stats_service import StatsService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _serialize(row: PracticeSession) -> dict:
    return SessionRead.model_validate(row).model_dump(mode="json", by_alias=True)


def _apply_payload(row: PracticeSession, payload: SessionCreate) -> None:
    row.micro_objective = payload.micro_objective
    row.technical_focus = payload.technical_focus.value
    row.duration_min = payload.duration_min
    row.bpm_target = payload.bpm_target
    row.bpm_achieved = payload.bpm_achieved
    row.quality_rating = payload.quality_rating
    row.rpe = payload.rpe
    row.mindset_checklist = (
        payload.mindset_checklist.model_dump(by_alias=True) if payload.mindset_checklist else None
    )
    row.reflection = payload.reflection


def _get_or_404(db: Session, session_id: int) -> PracticeSession:
    if session_id < 1:
        raise HTTPException(status_code=400, detail="Invalid session id")
    row = db.get(PracticeSession, session_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return row


@router.get("")
async def list_sessions(
    technical_focus: TechnicalFocus | None = Query(default=None, alias="technicalFocus"),
    date_from: datetime | None = Query(default=None, alias="dateFrom"),
    date_to: datetime | None = Query(default=None, alias="dateTo"),
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
) -> dict:
    """
    List sessions, most recent first.

    Args:
        technical_focus: Only sessions with this focus
        date_from / date_to: Inclusive ``created_at`` range (ISO 8601)
        limit: Page size, 1-100 (default: 50)
        offset: Rows to skip (default: 0)

    Returns:
        ``{success, data: {sessions, total, hasMore}}``
    """
    if limit < 1 or limit > 100:
        raise HTTPException(status_code=400, detail="Limit must be between 1 and 100")
    if offset < 0:
        raise HTTPException(status_code=400, detail="Offset must be non-negative")
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="dateFrom must be before or equal to dateTo")

    query = db.query(PracticeSession)
    if technical_focus:
        query = query.filter(PracticeSession.technical_focus == technical_focus.value)
    if date_from:
        query = query.filter(PracticeSession.created_at >= date_from)
    if date_to:
        query = query.filter(PracticeSession.created_at <= date_to)

    total = query.count()
    rows = (
        query.order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    page = SessionListResponse(
        sessions=[SessionRead.model_validate(row) for row in rows],
        total=total,
        has_more=offset + len(rows) < total,
    )
    return {"success": True, "data": page.model_dump(mode="json", by_alias=True)}


@router.get("/objective-suggestions")
async def get_objective_suggestions(q: str = "") -> dict:
    """Micro-objective templates, optionally filtered by a search term."""
    return {"success": True, "data": {"suggestions": filter_objective_suggestions(q)}}


@router.post("", status_code=201)
async def create_session(payload: SessionCreate, db: Session = Depends(get_db)) -> dict:
    """
    Store a session and answer with a motivational insight.

    Returns:
        ``{success, data: {session, insight, milestone}}``; ``milestone`` is
        ``None`` unless this session reached one.
    """
    row = PracticeSession()
    _apply_payload(row, payload)
    db.add(row)
    db.flush()

    milestone = StatsService(db).detect_milestone(row)
    db.commit()
    db.refresh(row)

    insight = generate_insight(payload)
    logger.info("Session %d stored | focus=%s insight=%s", row.id, row.technical_focus, insight.type)

    return {
        "success": True,
        "data": {
            "session": _serialize(row),
            "insight": insight.as_text(),
            "milestone": generate_milestone_message(milestone) if milestone else None,
        },
    }


@router.get("/{session_id}")
async def get_session(session_id: int, db: Session = Depends(get_db)) -> dict:
    return {"success": True, "data": _serialize(_get_or_404(db, session_id))}


@router.put("/{session_id}")
async def update_session(session_id: int, payload: SessionCreate, db: Session = Depends(get_db)) -> dict:
    """Replace every editable field of a session; ``created_at`` is kept."""

    row = _get_or_404(db, session_id)
    _apply_payload(row, payload)
    db.commit()
    db.refresh(row)
    return {"success": True, "data": _serialize(row)}


@router.delete("/{session_id}")
async def delete_session(session_id: int, db: Session = Depends(get_db)) -> dict:
    row = _get_or_404(db, session_id)
    db.delete(row)
    db.commit()
    logger.info("Session %d deleted", session_id)
    return {"success": True, "data": {"deleted": True, "id": session_id}}
