"""Condense practice history into prompt-sized structures."""
from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Any, Sequence

from app.models.schemas import AnalysisMetrics, SessionRead


DEFAULT_SUMMARY_THRESHOLD = 15
RECENT_SESSION_COUNT = 10
NOT_AVAILABLE = "N/A"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _short_date(value: datetime) -> str:
    """Format like an es-AR short date, e.g. ``8/10/2025``."""
    return f"{value.day}/{value.month}/{value.year}"


def _focus_label(session: SessionRead) -> str:
    return getattr(session.technical_focus, "value", session.technical_focus)


def _session_record(session: SessionRead) -> dict[str, Any]:
    if session.bpm_target and session.bpm_achieved:
        bpm = f"{session.bpm_achieved}/{session.bpm_target}"
    else:
        bpm = NOT_AVAILABLE

    checklist = session.mindset_checklist
    return {
        "fecha": _short_date(session.created_at),
        "objetivo": session.micro_objective,
        "foco": _focus_label(session),
        "duracion": session.duration_min,
        "bpm": bpm,
        "calidad": f"{session.quality_rating}★" if session.quality_rating else NOT_AVAILABLE,
        "mindset": checklist.model_dump(by_alias=True) if checklist else {},
    }


def _summarize_older(sessions: Sequence[SessionRead]) -> dict[str, Any]:
    count = len(sessions)
    rated = [s.quality_rating for s in sessions if s.quality_rating]

    if count:
        avg_duration = _round_half_up(sum(s.duration_min for s in sessions) / count)
    else:
        avg_duration = 0

    return {
        "totalSesiones": count,
        "duracionPromedio": avg_duration,
        "calidadPromedio": f"{sum(rated) / len(rated):.1f}" if rated else NOT_AVAILABLE,
        "focosDistribucion": dict(Counter(_focus_label(s) for s in sessions)),
    }


def summarize_sessions(
    sessions: Sequence[SessionRead],
    threshold: int = DEFAULT_SUMMARY_THRESHOLD,
) -> list[dict[str, Any]] | dict[str, Any]:
    """
    Reduce a most-recent-first session list to a JSON-serialisable summary.

    Up to ``threshold`` sessions are returned as one lightweight record each.
    Beyond that, only the ten most recent keep full records and the rest are
    collapsed into count / average / focus-distribution figures.

    The caller is responsible for ordering; sessions are never re-sorted.
    """
    if len(sessions) <= threshold:
        return [_session_record(s) for s in sessions]

    return {
        "sesionesRecientes": [_session_record(s) for s in sessions[:RECENT_SESSION_COUNT]],
        "resumenAnteriores": _summarize_older(sessions[RECENT_SESSION_COUNT:]),
    }


def compute_session_metrics(sessions: Sequence[SessionRead]) -> AnalysisMetrics:
    """Aggregate figures for the ``metrics`` block of a data analysis."""

    count = len(sessions)
    if not count:
        return AnalysisMetrics()

    total_minutes = sum(s.duration_min for s in sessions)
    bpm_values = [s.bpm_achieved for s in sessions if s.bpm_achieved]
    quality_values = [s.quality_rating for s in sessions if s.quality_rating]

    # Sessions without a checklist count as zero behaviours completed.
    completion = sum(
        s.mindset_checklist.completed_count() / 5 if s.mindset_checklist else 0.0
        for s in sessions
    ) / count

    return AnalysisMetrics(
        total_sessions=count,
        avg_duration=round(total_minutes / count, 1),
        avg_bpm=round(sum(bpm_values) / len(bpm_values), 1) if bpm_values else None,
        avg_quality=round(sum(quality_values) / len(quality_values), 2) if quality_values else None,
        total_minutes=total_minutes,
        sessions_by_focus=dict(Counter(_focus_label(s) for s in sessions)),
        mindset_completion_rate=round(completion, 3),
    )
