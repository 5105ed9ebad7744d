"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from app.database import SessionLocal
from app.services.completion_client import get_completion_client


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict:
    """Return a minimal status payload."""
    return {
        "status": "online",
        "ai_configured": get_completion_client().is_configured,
    }


@router.get("/database")
async def get_database_status() -> dict:
    """
    Check database connectivity.

    Returns:
        dict: {"status": "ok", "database": "connected", "sessions": int}
    """
    db = SessionLocal()  # Let it fail naturally - FastAPI will handle connection errors

    try:
        session_count = db.execute(text("SELECT COUNT(*) FROM sessions")).scalar_one()
        return {"status": "ok", "database": "connected", "sessions": session_count}
    except Exception:
        logger.exception("Database health check failed")
        db.rollback()
        raise HTTPException(status_code=503, detail="Database connection failed")
    finally:
        db.close()
