"""API endpoints for AI-powered practice analysis."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.schemas import AIAnalysisRequest, AIAnalysisResponse, QuickAnalysisResponse
from app.services.ai_analyzer import PracticeAnalyzer
from app.services.completion_client import CompletionClient, get_completion_client
from app.services.practice_repository import PracticeRepository


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-analysis", tags=["ai-analysis"])


def get_practice_analyzer(
    client: CompletionClient = Depends(get_completion_client),
    db: Session = Depends(get_db),
) -> PracticeAnalyzer:
    return PracticeAnalyzer(client, PracticeRepository(db))


@router.post("", response_model=AIAnalysisResponse)
async def run_ai_analysis(
    request: AIAnalysisRequest,
    analyzer: PracticeAnalyzer = Depends(get_practice_analyzer),
) -> dict[str, Any]:
    """
    Two-step analysis of recent sessions.

    Claude first returns structured JSON (metrics, patterns, trends,
    correlations, alerts), then turns it into a Markdown coaching report
    covering the requested ``analysisTypes``.

    Returns:
        dict: ``{success, dataAnalysis, insights, sessionCount}``

    Errors are raised as ``PracticeAnalysisError`` subclasses and rendered as
    ``{success: false, error}`` by the application exception handler.
    """
    logger.info(
        "Handling AI analysis request | types=%s limit=%d",
        ",".join(t.value for t in request.analysis_types),
        request.session_limit,
    )
    result = await analyzer.analyze(request.analysis_types, request.session_limit)
    return {"success": True, **result}


@router.post("/quick", response_model=QuickAnalysisResponse)
async def run_quick_analysis(
    request: AIAnalysisRequest,
    analyzer: PracticeAnalyzer = Depends(get_practice_analyzer),
) -> dict[str, Any]:
    """Single-call Markdown analysis over a summarised history."""

    result = await analyzer.quick_analyze(request.analysis_types, request.session_limit)
    return {"success": True, **result}
